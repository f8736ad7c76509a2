"""
Multi-step VM workflows
"""

from .clone import CloneStage, CloneRequest, CloneResult, CloneWorkflow

__all__ = [
    'CloneStage',
    'CloneRequest',
    'CloneResult',
    'CloneWorkflow',
]
