# -*- coding: utf-8 -*-
"""
Learning Agents
===============

Language-model collaborators of the learning dialogue.
"""

from .assessment_agent import AssessmentAgent, AssessmentResult
from .goal_agent import GoalAgent
from .guide_agent import GUIDE_TEMPERATURE, INITIAL_TEMPERATURE, MAX_CONTEXT_MESSAGES, GuideAgent

__all__ = [
    "AssessmentAgent",
    "AssessmentResult",
    "GoalAgent",
    "GuideAgent",
    "MAX_CONTEXT_MESSAGES",
    "INITIAL_TEMPERATURE",
    "GUIDE_TEMPERATURE",
]
