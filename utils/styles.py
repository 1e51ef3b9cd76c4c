"""
Shared animation styles for the map (user pulse, click ripple).

Several MapView instances in the same session must not emit duplicate
style declarations, yet the keyframes have to stay on the page for as long
as any of them is mounted. Each mounted view holds a claim on its scope;
the oldest claim renders the <style> block and hands it to the next view
when it unmounts. A scope is forgotten once its last view is gone, so
closed sessions leave nothing behind.
"""
import logging
import threading
from typing import Callable, Dict, Hashable, List

logger = logging.getLogger(__name__)

GLOBAL_ANIMATION_CSS = """
<style>
@keyframes userPulse {
    0% {
        box-shadow: 0 4px 12px rgba(59, 130, 246, 0.4), 0 0 0 0 rgba(59, 130, 246, 0.7);
    }
    70% {
        box-shadow: 0 4px 12px rgba(59, 130, 246, 0.4), 0 0 0 15px rgba(59, 130, 246, 0);
    }
    100% {
        box-shadow: 0 4px 12px rgba(59, 130, 246, 0.4), 0 0 0 0 rgba(59, 130, 246, 0);
    }
}
@keyframes ripple {
    0% { transform: translate(-50%, -50%) scale(0); opacity: 1; }
    100% { transform: translate(-50%, -50%) scale(3); opacity: 0; }
}
</style>
"""


class _Claim:
    """One mounted view's interest in the shared styles."""

    def __init__(self, on_owner: Callable[[bool], None]):
        self.on_owner = on_owner


# scope -> claims in mount order; the first claim owns the <style> block
_claims: Dict[Hashable, List[_Claim]] = {}
_lock = threading.Lock()


def claim_global_styles(scope: Hashable, on_owner: Callable[[bool], None]) -> Callable[[], None]:
    """
    Join the set of views sharing the animation styles of a scope.

    Exactly one claim per scope owns the styles at any time: the oldest one
    still held. `on_owner(True)` is called when a claim becomes the owner,
    immediately for the first claim in a scope, later for the next claim
    in line when the owner is released.

    Args:
        scope: Lifetime key for the styles (the Solara kernel id in the app)
        on_owner: Called with True when this claim must render the CSS

    Returns:
        A release callable. Releasing the last claim of a scope forgets
        the scope entirely.
    """
    claim = _Claim(on_owner)
    with _lock:
        claims = _claims.setdefault(scope, [])
        claims.append(claim)
        is_owner = len(claims) == 1

    if is_owner:
        logger.debug(f"Map animation styles owned by a new view in scope {scope!r}")
        on_owner(True)

    def release():
        successor = None
        with _lock:
            claims = _claims.get(scope)
            if not claims or claim not in claims:
                return
            was_owner = claims[0] is claim
            claims.remove(claim)
            if not claims:
                del _claims[scope]
            elif was_owner:
                successor = claims[0]

        if successor is not None:
            logger.debug(f"Map animation styles handed over in scope {scope!r}")
            successor.on_owner(True)

    return release


def styles_registered(scope: Hashable = None) -> bool:
    """True while at least one view holds a claim in the scope."""
    with _lock:
        return scope in _claims


def claim_count(scope: Hashable = None) -> int:
    with _lock:
        return len(_claims.get(scope, ()))
