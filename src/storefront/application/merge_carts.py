"""Application service: merge the guest cart into the customer's cart on login.

Runs once per guest -> authenticated transition. Guest lines are replayed
into the authenticated cart one at a time, each add awaited before the
next, because every add is reconciled against the cart the previous add
produced. Concurrent adds against one cart could drop or duplicate lines.

Known limitation (kept on purpose, see MergePolicy): the merge is best
effort. A line that fails to transfer (e.g. it went out of stock since it
was added) is logged and skipped, and the guest cart is cleared anyway,
so that line is lost. Nothing is ever transferred twice.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from storefront.application.cart import AuthCart, GuestCart
from storefront.application.cart_context import CartContext
from storefront.domain.exceptions import DomainException, PartialMergeFailure
from storefront.domain.model.cart import CartItem

logger = logging.getLogger(__name__)


class MergePolicy(Enum):
    # Failed lines are logged and dropped with the rest of the guest cart.
    DISCARD_FAILED = "DISCARD_FAILED"
    # Only transferred lines leave the guest cart; failed lines stay there and
    # PartialMergeFailure is raised once the switch to the customer's cart is done.
    RETAIN_FAILED = "RETAIN_FAILED"


@dataclass(frozen=True)
class AuthStateChanged:
    """Emitted by the session service whenever sign-in state changes.

    ``session`` identifies the signed-in session (token, customer key);
    it is None on logout.
    """

    authenticated: bool
    session: str | None = None


@dataclass(frozen=True)
class FailedTransfer:
    item: CartItem
    reason: str


@dataclass
class MergeReport:
    transferred: list[CartItem] = field(default_factory=list)
    failed: list[FailedTransfer] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.transferred) + len(self.failed)

    @property
    def complete(self) -> bool:
        return not self.failed


class CartMergeCoordinator:

    def __init__(
        self,
        context: CartContext,
        auth_cart_factory: Callable[[str | None], AuthCart],
        policy: MergePolicy = MergePolicy.DISCARD_FAILED,
    ) -> None:
        self._context = context
        self._auth_cart_factory = auth_cart_factory
        self._policy = policy
        self._authenticated = context.is_authenticated

    async def handle(self, event: AuthStateChanged) -> MergeReport | None:
        """React to a sign-in state change.

        Only guest -> authenticated merges. Authenticated -> authenticated
        is ignored; logout switches back to the guest cart without merging.
        """
        if event.authenticated == self._authenticated:
            return None

        # Flip before the first await so a duplicate event arriving while
        # the merge is suspended is ignored.
        self._authenticated = event.authenticated

        if not event.authenticated:
            await self._sign_out()
            return None

        auth_cart = self._auth_cart_factory(event.session)
        return await self.merge(self._context.guest, auth_cart)

    async def merge(self, guest: GuestCart, auth: AuthCart) -> MergeReport:
        """Transfer guest lines into ``auth`` and make ``auth`` the active cart."""
        report = MergeReport()
        guest_items = list(guest.items)

        if guest_items:
            logger.info("Transferring %d guest cart item(s) on sign-in", len(guest_items))
            for item in guest_items:
                try:
                    await auth.add_item(item.product_id, item.quantity.value, item.variant_id)
                except DomainException as exc:
                    logger.error(
                        "Could not transfer %s x%d (product=%s, variant=%s): %s",
                        item.product_name,
                        item.quantity.value,
                        item.product_id,
                        item.variant_id,
                        exc,
                    )
                    report.failed.append(FailedTransfer(item=item, reason=str(exc)))
                else:
                    report.transferred.append(item)

            try:
                if report.failed and self._policy is MergePolicy.RETAIN_FAILED:
                    await self._drop_transferred(guest, report.transferred)
                else:
                    await guest.clear_cart()
            finally:
                self._context.activate(auth)
        else:
            self._context.activate(auth)

        try:
            await auth.load_cart()
        except DomainException as exc:
            # The transfer already happened; keep the state of the last add.
            logger.error("Could not reload the customer cart after merge: %s", exc)

        if report.failed:
            logger.warning(
                "Guest cart merge incomplete: %d of %d item(s) not transferred",
                len(report.failed),
                report.attempted,
            )
            if self._policy is MergePolicy.RETAIN_FAILED:
                raise PartialMergeFailure(report)
        return report

    # --- Internal helpers -----------------------------------------------------

    async def _sign_out(self) -> None:
        previous = self._context.active
        self._context.activate(self._context.guest)
        if previous is not self._context.guest:
            await previous.dispose()
        await self._context.guest.load_cart()

    @staticmethod
    async def _drop_transferred(guest: GuestCart, transferred: list[CartItem]) -> None:
        """Remove only the lines that made it across; failed lines stay put."""
        for item in transferred:
            await guest.remove_item(item.id)
