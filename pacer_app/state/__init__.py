"""
Workout session state machine and interval scheduling module.

Manages the session lifecycle NOT_STARTED -> ACTIVE <-> PAUSED -> COMPLETED,
or STOPPED, and maps elapsed time to interval change, warning and completion
events.
"""
