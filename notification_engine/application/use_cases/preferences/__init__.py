"""Preference management and delivery-eligibility use cases."""

from .delete_preferences import delete_preferences
from .evaluator import ContentClassification, DeliveryDecision, evaluate, quiet_hours_end
from .get_preferences import get_preferences
from .should_send import evaluate_for_user, is_in_quiet_hours, should_send
from .update_preferences import update_preferences

__all__ = [
    "ContentClassification",
    "DeliveryDecision",
    "delete_preferences",
    "evaluate",
    "evaluate_for_user",
    "get_preferences",
    "is_in_quiet_hours",
    "quiet_hours_end",
    "should_send",
    "update_preferences",
]
