# MIT License
# Copyright (c) 2025 Hashborn

"""
Observability Module

Provides Prometheus metrics for payout runs.
"""

from .metrics import metrics_registry, record_run_success, record_run_failure

__all__ = ['metrics_registry', 'record_run_success', 'record_run_failure']
