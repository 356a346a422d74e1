from price_worker.worker.orchestrator import PriceCheckOrchestrator, RunSummary

__all__ = ['PriceCheckOrchestrator', 'RunSummary']
