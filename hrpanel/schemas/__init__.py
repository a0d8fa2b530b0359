"""Pydantic schemas for submitted form payloads."""

from .settings import BonusTierForm, EvaluationRangeForm, parse_form

__all__ = ["BonusTierForm", "EvaluationRangeForm", "parse_form"]
