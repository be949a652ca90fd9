"""
Association testing and multiple-testing evaluation
"""

from .welch import welch_pvalues
from .multiple_testing import evaluate_detections, count_detections, fill_null_pvalues

__all__ = ['welch_pvalues', 'evaluate_detections', 'count_detections', 'fill_null_pvalues']
