"""
Transient overlay dismissal (cookie consent, modals).
"""

import asyncio
from typing import List, Optional

from .. import locators, scripts
from ..errors import SessionError
from ..logger import get_logger
from .driver import SessionDriver, Interaction

log = get_logger('overlays')


async def dismiss_overlays(
    driver: SessionDriver,
    selectors: Optional[List[str]] = None,
    pause: float = 2.0,
) -> int:
    """
    Click every visible overlay close control.

    Returns number dismissed. Never raises for a control that vanished
    or refused the click; overlays are best-effort.
    """
    dismissed = 0
    for sel in selectors or locators.OVERLAY_CLOSE_SELECTORS:
        try:
            if not await driver.query(scripts.ELEMENT_EXISTS, sel):
                continue
            await driver.interact(sel, Interaction.CLICK)
            dismissed += 1
            log.info(f"Dismissed overlay: {sel}")
        except SessionError as e:
            log.debug(f"Overlay {sel} not dismissed: {e}")
            continue

    # Wait for modal to disappear
    if dismissed and pause > 0:
        await asyncio.sleep(pause)
    return dismissed
