"""
Time-axis planner core.

Components:
- time_window.py: view date range + collapsed hour range (TimeWindow)
- date_filter.py: which quests a view shows
- clipper.py: clip a quest to one day, in axis hours (DisplayInterval)
- layout.py: side-by-side packing of overlapping quests (LayoutBox)
- axis.py: pointer offset -> (day, hour, minute) for empty-slot clicks
- drag.py: move / resize gestures written back to the quest store
- pointer.py: in-process pointer stream the drag subscribes to
- milestones.py: week/month/year highlight panels
- engine.py: facade used by the presentation layer
"""
