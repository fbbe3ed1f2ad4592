# -*- coding: utf-8 -*-
"""
Learning dialogue errors.

Collaborator errors are absorbed by the graph nodes (default goal, stalled
assessment, apology message); ``LearningStateError`` is raised for state that
violates the data-model invariants, e.g. a corrupt persisted session.
"""


class CollaboratorError(Exception):
    """A language-model collaborator could not produce a usable answer."""


class GoalExtractionError(CollaboratorError):
    """Goal extraction failed or returned nothing."""


class AssessmentError(CollaboratorError):
    """Assessment failed: provider error, unparseable or incomplete output."""


class ContractViolationError(AssessmentError):
    """The assessment returned a label outside the closed vocabulary."""


class GuidanceError(CollaboratorError):
    """Guidance generation failed or returned nothing."""


class LearningStateError(ValueError):
    """A graph state violates the learning data-model invariants."""


__all__ = [
    "CollaboratorError",
    "GoalExtractionError",
    "AssessmentError",
    "ContractViolationError",
    "GuidanceError",
    "LearningStateError",
]
