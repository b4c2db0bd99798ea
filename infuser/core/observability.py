from __future__ import annotations

import logging
import time
import uuid
from typing import Callable, Optional, Any

from infuser.core.config import settings

logger = logging.getLogger("infuser.store")


def generate_correlation_id(existing: Optional[str] = None) -> str:
	if existing and existing.strip():
		return existing.strip()
	return str(uuid.uuid4())


def configure_logging(level: Optional[str] = None) -> logging.Logger:
	"""Attach a stream handler to the package logger once."""
	root = logging.getLogger("infuser")
	if not root.handlers:
		handler = logging.StreamHandler()
		handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
		root.addHandler(handler)
	root.setLevel((level or settings.LOG_LEVEL).upper())
	return root


def log_store_call(provider: str, target: str, operation: str, correlation_id: Optional[str], call: Callable[[], Any]) -> Any:
	"""Execute a row store call and log its duration.

	Args:
		provider: Store implementation name (e.g., sqlalchemy, memory)
		target: Target entity (e.g., table name)
		operation: Operation name
		correlation_id: Correlation ID for linkage
		call: Callable that performs the operation

	Returns:
		Result of `call()`
	"""
	if not settings.ENABLE_STORE_LOGGING:
		return call()

	start_ns = time.monotonic_ns()
	error_code: Optional[str] = None
	try:
		result = call()
		return result
	except Exception as e:
		error_code = type(e).__name__
		raise
	finally:
		duration_ms = int((time.monotonic_ns() - start_ns) / 1_000_000)
		payload = {
			"correlation_id": correlation_id or generate_correlation_id(),
			"provider": provider,
			"target": target,
			"operation": operation,
			"duration_ms": duration_ms,
			"error_code": error_code,
		}
		if error_code:
			logger.warning(f"Store call failed: {operation}", extra=payload)
		else:
			logger.info(f"Store call: {operation}", extra=payload)
