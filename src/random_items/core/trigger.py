"""Per-tick trigger loop: accumulate elapsed time, draw on each interval."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from random_items.config import TriggerConfig
from random_items.core.dispatcher import DispatchError, Dispatcher
from random_items.core.picker import ItemPicker
from random_items.core.pool import AdmittedItem

logger = logging.getLogger(__name__)


@dataclass
class TriggerState:
    elapsed: float = 0.0
    running: bool = False


class TriggerLoop:
    """Two-state (idle/active) loop driven by an external tick source.

    ``tick`` never raises on a failed draw or dispatch: failures are logged
    and counted, and the accumulator is reset either way.
    """

    def __init__(
        self,
        picker: ItemPicker,
        dispatcher: Dispatcher,
        settings: TriggerConfig,
        rng: random.Random | None = None,
    ) -> None:
        self.picker = picker
        self.dispatcher = dispatcher
        self.settings = settings
        self.rng = rng or random.Random(settings.seed)
        self.state = TriggerState()
        self.draws = 0
        self.failures = 0
        self.last_item: AdmittedItem | None = None

    @property
    def running(self) -> bool:
        return self.state.running

    def start(self) -> None:
        if self.state.running:
            return
        # Build eagerly so the first draw does not stall a tick
        self.picker.rebuild()
        self.state.running = True
        logger.info("Trigger loop started (interval=%.2fs)", self.settings.interval_seconds)

    def stop(self) -> None:
        # The accumulator is kept; a restart resumes from it
        self.state.running = False
        logger.info("Trigger loop stopped")

    def toggle(self) -> None:
        if self.state.running:
            self.stop()
        else:
            self.start()

    def tick(self, dt: float) -> bool:
        """Advance by ``dt`` seconds. Returns True if a draw was attempted."""
        if not self.state.running:
            return False

        self.state.elapsed += dt
        if self.state.elapsed < self.settings.interval_seconds:
            return False

        self.state.elapsed = 0.0
        self._give_random_item()
        return True

    def _give_random_item(self) -> None:
        item = self.picker.draw(self.rng)
        if item is None:
            self.failures += 1
            return

        try:
            self.dispatcher.dispatch(
                item.title,
                item.identifier,
                self.settings.spawn_in_world,
            )
        except DispatchError as e:
            self.failures += 1
            logger.error("Failed to dispatch %s: %s", item.title, e)
            return
        except Exception:
            self.failures += 1
            logger.exception("Dispatcher raised while handing out %s", item.title)
            return
        self.draws += 1
        self.last_item = item
