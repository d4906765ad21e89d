from runas.domain.execution.port.reporter import Reporter

__all__ = ["Reporter"]
