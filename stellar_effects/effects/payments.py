"""Payment, path payment and clawback derivations."""

from __future__ import annotations

from stellar_effects.decoder.models import Operation, PathPaymentSuccess
from stellar_effects.effects.common import Diffs, credit, debit, success_payload
from stellar_effects.effects.models import EffectDraft
from stellar_effects.effects.offers import trade_effects


def payment(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    body = op.body
    return [
        debit(op.source_account, body.asset, body.amount),
        credit(body.destination, body.asset, body.amount),
    ]


def _amount_sent(result: PathPaymentSuccess) -> int:
    """Sum of what the first hop took from the sender."""
    if not result.claims:
        return result.last.amount
    first_asset = result.claims[0].asset_bought
    total = 0
    for claim in result.claims:
        if claim.asset_bought != first_asset:
            break
        total += claim.amount_bought
    return total


def path_payment_strict_receive(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    body = op.body
    result = success_payload(op, PathPaymentSuccess)
    drafts = [
        debit(op.source_account, body.send_asset, _amount_sent(result)),
        credit(body.destination, body.dest_asset, body.dest_amount),
    ]
    return drafts + trade_effects(op, result.claims, diffs)


def path_payment_strict_send(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    body = op.body
    result = success_payload(op, PathPaymentSuccess)
    drafts = [
        debit(op.source_account, body.send_asset, body.send_amount),
        credit(body.destination, body.dest_asset, result.last.amount),
    ]
    return drafts + trade_effects(op, result.claims, diffs)


def clawback(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    body = op.body
    return [
        debit(body.from_account, body.asset, body.amount),
        credit(op.source_account, body.asset, body.amount),
    ]
