# MIT License
# Copyright (c) 2025 Hashborn

"""
Prometheus Metrics for Payout Runs

Metrics:
- Payout runs by outcome (ok / data_integrity / weighting_invariant / cancelled)
- Blocks processed, reward-bearing blocks
- Per-run payout totals
"""

from prometheus_client import Counter, Gauge, Histogram, CollectorRegistry

# Create registry for metrics
metrics_registry = CollectorRegistry()

# ═══════════════════════════════════════════════════════════════════
# RUN METRICS
# ═══════════════════════════════════════════════════════════════════

payout_runs_total = Counter(
    'payout_runs_total',
    'Total number of payout runs by outcome',
    ['status'],
    registry=metrics_registry
)

payout_blocks_processed_total = Counter(
    'payout_blocks_processed_total',
    'Total number of blocks processed by successful payout runs',
    registry=metrics_registry
)

payout_reward_blocks_total = Counter(
    'payout_reward_blocks_total',
    'Total number of reward-bearing blocks allocated by successful payout runs',
    registry=metrics_registry
)

payout_delegators_per_run = Histogram(
    'payout_delegators_per_run',
    'Number of delegators receiving a payout per run',
    buckets=[0, 1, 5, 10, 50, 100, 500, 1000],
    registry=metrics_registry
)

# ═══════════════════════════════════════════════════════════════════
# ECONOMIC METRICS
# ═══════════════════════════════════════════════════════════════════

payout_last_total = Gauge(
    'payout_last_total',
    'Total amount owed to delegators by the last successful run',
    registry=metrics_registry
)


# ═══════════════════════════════════════════════════════════════════
# HELPER FUNCTIONS
# ═══════════════════════════════════════════════════════════════════

def record_run_success(result):
    """
    Update metrics after a successful payout run.

    Args:
        result: PayoutResult of the run
    """
    payout_runs_total.labels(status='ok').inc()
    payout_blocks_processed_total.inc(len(result.blocks_included))
    payout_reward_blocks_total.inc(len({d.block_height for d in result.details}))
    payout_delegators_per_run.observe(len(result.payouts))
    payout_last_total.set(float(result.total_payout))


def record_run_failure(error):
    """
    Update metrics after a payout run aborted.

    Args:
        error: PayoutError that aborted the run
    """
    payout_runs_total.labels(status=error.kind).inc()
