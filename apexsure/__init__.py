"""ApexSure digital insurance portal: policy submission orchestrator."""

__version__ = "1.0.0"
