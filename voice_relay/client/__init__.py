from .backoff import connect_with_retry, reconnect_delay_s

__all__ = ["connect_with_retry", "reconnect_delay_s"]
