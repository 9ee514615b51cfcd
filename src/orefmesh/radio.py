"""Meshtastic command line adapter.

The relay only needs two capabilities from the radio: send a text on a
channel index, and check at startup that a node answers. Both are
expressed by :class:`RadioTransport` so dispatch logic can be exercised
against a test double.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from orefmesh._constants import RADIO_CONNECTED_SENTINEL, RADIO_EXECUTABLE
from orefmesh.exceptions import RadioProbeError, RadioTransportError

_logger = logging.getLogger(__name__)


class RadioTransport(Protocol):
    """Structural radio interface used by the dispatcher."""

    async def send(self, channel: int, text: str) -> None:
        ...

    async def probe(self) -> None:
        ...


class MeshtasticCli:
    """Runs the ``meshtastic`` executable as a subprocess.

    Parameters
    ----------
    executable : str
        Program name or path.
    host : str or None
        ``host:port`` of a network-attached node.
    send_timeout : float
        Seconds a send may run before the process is killed.
    probe_timeout : float
        Seconds the ``--info`` probe may run before the process is killed.
    """

    def __init__(
        self,
        executable: str = RADIO_EXECUTABLE,
        *,
        host: str | None = None,
        send_timeout: float = 30.0,
        probe_timeout: float = 30.0,
    ) -> None:
        self._executable = executable
        self._host = host
        self._send_timeout = send_timeout
        self._probe_timeout = probe_timeout

    def _host_args(self) -> list[str]:
        return ["--host", self._host] if self._host else []

    def send_args(self, channel: int, text: str) -> list[str]:
        return ["--ch-index", str(channel), "--sendtext", text, *self._host_args()]

    def probe_args(self) -> list[str]:
        return [*self._host_args(), "--info"]

    async def send(self, channel: int, text: str) -> None:
        """Send *text* on *channel*; raises :class:`RadioTransportError` on failure."""
        try:
            proc = await asyncio.create_subprocess_exec(
                self._executable,
                *self.send_args(channel, text),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise RadioTransportError(
                f"Failed to run {self._executable}: {exc}",
                channel=channel,
            ) from exc

        try:
            _, stderr = await _communicate(proc, self._send_timeout)
        except TimeoutError as exc:
            raise RadioTransportError(
                f"{self._executable} timed out after {self._send_timeout}s",
                channel=channel,
            ) from exc

        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()[:200]
            raise RadioTransportError(
                f"{self._executable} exited with status {proc.returncode}: {detail}",
                channel=channel,
                returncode=proc.returncode,
            )

    async def probe(self) -> None:
        """Check the node answers ``--info``; raises :class:`RadioProbeError` otherwise."""
        try:
            proc = await asyncio.create_subprocess_exec(
                self._executable,
                *self.probe_args(),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as exc:
            raise RadioProbeError(f"Failed to execute {self._executable} --info: {exc}") from exc

        try:
            stdout, _ = await _communicate(proc, self._probe_timeout)
        except TimeoutError as exc:
            raise RadioProbeError(
                f"{self._executable} --info timed out after {self._probe_timeout}s"
            ) from exc

        check_probe_output(stdout.decode("utf-8", errors="replace"))
        _logger.info("Successfully connected to the node.")


async def _communicate(proc: asyncio.subprocess.Process, timeout: float) -> tuple[bytes, bytes]:
    """Wait for *proc* to finish; the child is killed and reaped on timeout or cancellation."""
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except BaseException:
        if proc.returncode is None:
            proc.kill()
            await proc.wait()
        raise
    return stdout or b"", stderr or b""


def check_probe_output(output: str) -> None:
    """Validate ``--info`` output: no error text and the connected sentinel first."""
    if "Error" in output:
        raise RadioProbeError(f"Received error output: {output.strip()[:200]}")
    lines = output.splitlines()
    if not lines:
        raise RadioProbeError("Output from --info was empty.")
    if lines[0].strip() != RADIO_CONNECTED_SENTINEL:
        raise RadioProbeError(f"Failed to connect to the radio. First line: {lines[0]}")
