# =============================================================================
# setu_core/offline/connection_manager.py
# Connectivity Detection and Edge Notification
# =============================================================================
"""
ConnectivityMonitor - owns the single process-wide "online" boolean.

Features:
- Platform transition events via set_online()
- Manual probe of internet and Supabase reachability
- Optional periodic health checks as an asyncio task
- Callbacks fired only when the boolean actually flips
"""

from __future__ import annotations
import asyncio
import contextlib
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple
from urllib.parse import urlparse
import logging

logger = logging.getLogger(__name__)

# Receives (online, previous)
ConnectivityCallback = Callable[[bool, bool], None]

DEFAULT_PROBE_HOSTS: Tuple[Tuple[str, int], ...] = (
    ("8.8.8.8", 53),        # Google DNS
    ("1.1.1.1", 53),        # Cloudflare DNS
    ("208.67.222.222", 53),  # OpenDNS
)


class ConnectionStatus(Enum):
    """Connection status states."""
    ONLINE = "online"           # Internet + Supabase reachable
    OFFLINE = "offline"         # No connectivity
    DEGRADED = "degraded"       # Internet OK but Supabase unavailable
    UNKNOWN = "unknown"         # Initial state


@dataclass
class ConnectionState:
    """Current connection state with metadata."""
    status: ConnectionStatus = ConnectionStatus.UNKNOWN
    internet_available: bool = False
    supabase_available: bool = False
    last_check: Optional[datetime] = None
    last_online: Optional[datetime] = None
    consecutive_failures: int = 0
    error_message: Optional[str] = None


class ConnectivityMonitor:
    """
    Observable connectivity signal.

    Usage:
        monitor = ConnectivityMonitor(supabase_url=settings.supabase_url)
        monitor.subscribe(lambda online, previous: ...)
        monitor.set_online(True)      # platform "online" event
        await monitor.probe()         # manual check
    """

    CHECK_INTERVAL_ONLINE = 30      # Seconds between checks when online
    CHECK_INTERVAL_OFFLINE = 10     # Seconds between checks when offline
    CONNECTION_TIMEOUT = 5          # Timeout for connection tests

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        probe_hosts: Sequence[Tuple[str, int]] = DEFAULT_PROBE_HOSTS,
        timeout: float = CONNECTION_TIMEOUT,
        initial_online: Optional[bool] = None,
    ):
        self.supabase_url = supabase_url
        self.probe_hosts = tuple(probe_hosts)
        self.timeout = timeout
        self._state = ConnectionState()
        self._callbacks: List[ConnectivityCallback] = []
        self._monitor_task: Optional[asyncio.Task] = None

        if initial_online is not None:
            self._apply(
                ConnectionStatus.ONLINE if initial_online else ConnectionStatus.OFFLINE,
                internet=initial_online,
                supabase=initial_online,
                notify=False,
            )

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def status(self) -> ConnectionStatus:
        return self._state.status

    @property
    def is_online(self) -> bool:
        """The connectivity signal consumed by every other component."""
        return self._state.status == ConnectionStatus.ONLINE

    # =========================================================================
    # STATE CHANGES
    # =========================================================================

    def _apply(
        self,
        status: ConnectionStatus,
        internet: bool,
        supabase: bool,
        notify: bool = True,
        error: Optional[str] = None,
    ) -> None:
        previous_status = self._state.status
        previous_online = self.is_online
        now = datetime.now()

        self._state.status = status
        self._state.internet_available = internet
        self._state.supabase_available = supabase
        self._state.last_check = now
        self._state.error_message = error

        if status == ConnectionStatus.ONLINE:
            self._state.last_online = now
            self._state.consecutive_failures = 0
        else:
            self._state.consecutive_failures += 1

        if previous_status != status:
            logger.info(f"Connection status changed: {previous_status.value} -> {status.value}")

        if notify and previous_online != self.is_online:
            self._notify_callbacks(self.is_online, previous_online)

    def set_online(self, online: bool) -> None:
        """Record a platform online/offline transition event."""
        if online:
            self._apply(ConnectionStatus.ONLINE, internet=True, supabase=True)
        else:
            self._apply(ConnectionStatus.OFFLINE, internet=False, supabase=False)

    def force_offline(self) -> None:
        """Force offline mode (for testing or user preference)."""
        self.set_online(False)
        logger.info("Forced offline mode")

    # =========================================================================
    # PROBING
    # =========================================================================

    async def _can_connect(self, host: str, port: int) -> bool:
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port),
                timeout=self.timeout,
            )
        except (OSError, asyncio.TimeoutError):
            return False

        writer.close()
        with contextlib.suppress(OSError):
            await writer.wait_closed()
        return True

    async def _check_internet(self) -> bool:
        for host, port in self.probe_hosts:
            if await self._can_connect(host, port):
                return True
        return False

    async def _check_supabase(self) -> bool:
        if not self.supabase_url:
            # No Supabase configured - local-only mode
            return True

        parsed = urlparse(self.supabase_url)
        if not parsed.hostname:
            self._state.error_message = f"Invalid Supabase URL: {self.supabase_url}"
            return False

        port = parsed.port or (443 if parsed.scheme == "https" else 80)
        return await self._can_connect(parsed.hostname, port)

    async def probe(self) -> bool:
        """
        Check reachability and update the signal.

        Returns:
            The resulting online value
        """
        internet_ok = await self._check_internet()
        supabase_ok = await self._check_supabase() if internet_ok else False

        if internet_ok and supabase_ok:
            status = ConnectionStatus.ONLINE
        elif internet_ok:
            status = ConnectionStatus.DEGRADED
        else:
            status = ConnectionStatus.OFFLINE

        self._apply(
            status,
            internet=internet_ok,
            supabase=supabase_ok,
            error=None if status == ConnectionStatus.ONLINE else self._state.error_message,
        )
        return self.is_online

    # =========================================================================
    # PERIODIC MONITORING
    # =========================================================================

    def start_monitoring(self) -> None:
        """Start the periodic probe task on the running event loop."""
        if self._monitor_task is not None and not self._monitor_task.done():
            return
        self._monitor_task = asyncio.get_running_loop().create_task(self._monitoring_loop())
        logger.debug("Connection monitoring started")

    async def stop_monitoring(self) -> None:
        task, self._monitor_task = self._monitor_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug("Connection monitoring stopped")

    async def _monitoring_loop(self) -> None:
        while True:
            interval = self.CHECK_INTERVAL_ONLINE if self.is_online else self.CHECK_INTERVAL_OFFLINE
            await asyncio.sleep(interval)
            try:
                await self.probe()
            except Exception as e:
                logger.error(f"Error in connection check: {e}")

    # =========================================================================
    # OBSERVERS
    # =========================================================================

    def subscribe(self, callback: ConnectivityCallback) -> None:
        """
        Register a callback for online/offline flips.

        Args:
            callback: Called with (online, previous) on every change of the signal
        """
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unsubscribe(self, callback: ConnectivityCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _notify_callbacks(self, online: bool, previous: bool) -> None:
        for callback in list(self._callbacks):
            try:
                callback(online, previous)
            except Exception as e:
                logger.error(f"Error in connection callback: {e}")

    def get_status_display(self) -> dict:
        """Get status information for UI display."""
        return {
            "status": self._state.status.value,
            "is_online": self.is_online,
            "internet": self._state.internet_available,
            "supabase": self._state.supabase_available,
            "last_check": self._state.last_check.isoformat() if self._state.last_check else None,
            "last_online": self._state.last_online.isoformat() if self._state.last_online else None,
            "failures": self._state.consecutive_failures,
            "error": self._state.error_message,
        }
