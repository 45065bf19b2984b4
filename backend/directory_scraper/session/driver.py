"""
Session Driver capability.

The crawler core only talks to the remote document through this interface.
Every call suspends until it completes or its timeout elapses.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional


class WaitPolicy(Enum):
    """When a load counts as finished."""
    LOAD = "load"
    DOM_CONTENT_LOADED = "domcontentloaded"
    NETWORK_IDLE = "networkidle"


class Interaction(Enum):
    """Interactions the core may perform against a located element."""
    CLICK = "click"          # structured click (scroll, hover, press, release)
    FOCUS = "focus"
    PRESS = "press"          # synthetic mousedown
    RELEASE = "release"      # synthetic mouseup
    ACTIVATE = "activate"    # synthetic click event


class SessionDriver(ABC):
    """Drives one remote document session."""

    @abstractmethod
    async def open(self, address: str, wait_policy: WaitPolicy = WaitPolicy.NETWORK_IDLE) -> None:
        """
        Load an address.

        Raises:
            SessionTimeout: if the load does not finish in time
            SessionError: for any other load failure
        """

    @abstractmethod
    async def current_address(self) -> str:
        """Address of the currently loaded document."""

    @abstractmethod
    async def query(self, script: str, arg: Optional[Any] = None) -> Any:
        """Evaluate a script against the current document and return its value."""

    @abstractmethod
    async def interact(self, locator: str, action: Interaction) -> None:
        """
        Perform one interaction against the first element matching locator.

        Raises:
            SessionError: if the element is missing or the interaction fails
        """

    @abstractmethod
    async def await_locator(self, locator: str, timeout_ms: int) -> bool:
        """Wait for an element to be attached. False on timeout."""

    @abstractmethod
    async def await_navigation_signal(self, timeout_ms: int) -> bool:
        """Wait for the document to navigate and settle. False on timeout."""

    @abstractmethod
    async def reload(self, wait_policy: WaitPolicy = WaitPolicy.NETWORK_IDLE) -> None:
        """Reload the current document. Raises like open()."""
