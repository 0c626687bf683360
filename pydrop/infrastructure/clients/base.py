"""
Shared client bookkeeping.

Request metrics recorded by the API client.
"""

import time
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class ClientMetrics:
    """Client request metrics."""
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    total_response_time: float = 0.0
    min_response_time: float = float('inf')
    max_response_time: float = 0.0
    last_request_time: Optional[float] = None
    bytes_sent: int = 0
    requests_by_route: Dict[str, int] = field(default_factory=dict)
    error_count: int = 0
    last_error: Optional[str] = None

    @property
    def average_response_time(self) -> float:
        """Calculate average response time."""
        if self.total_requests == 0:
            return 0.0
        return self.total_response_time / self.total_requests

    @property
    def success_rate(self) -> float:
        """Calculate success rate percentage."""
        if self.total_requests == 0:
            return 100.0
        return (self.successful_requests / self.total_requests) * 100.0

    def record_request(self, route: str, success: bool, response_time: float, bytes_sent: int = 0) -> None:
        """Record a request result."""
        self.total_requests += 1
        self.total_response_time += response_time
        self.last_request_time = time.time()
        self.bytes_sent += bytes_sent
        self.requests_by_route[route] = self.requests_by_route.get(route, 0) + 1

        if success:
            self.successful_requests += 1
        else:
            self.failed_requests += 1

        if response_time < self.min_response_time:
            self.min_response_time = response_time
        if response_time > self.max_response_time:
            self.max_response_time = response_time

    def record_error(self, error: str) -> None:
        """Record an error."""
        self.error_count += 1
        self.last_error = error
