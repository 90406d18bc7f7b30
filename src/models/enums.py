"""
Enum definitions for the Items front-end
"""

from enum import Enum


class AlertSeverity(str, Enum):
    """CSS class of the notification banner"""
    SUCCESS = "alert-success"
    DANGER = "alert-danger"


class FormMode(str, Enum):
    """
    Mode of the item form.

    - CREATE: hidden elementId is empty, submitting adds a new item
    - EDIT: hidden elementId holds the id of the item being edited
    """
    CREATE = "create"
    EDIT = "edit"
