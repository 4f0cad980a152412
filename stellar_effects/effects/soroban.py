"""
Smart-contract operations. Host function invocations are described by the
balances they moved; footprint operations by the keys they touched.
"""

from __future__ import annotations

from stellar_effects.decoder.models import Asset, EntryType, MuxedAccount, Operation
from stellar_effects.effects.common import Diffs, credit, debit
from stellar_effects.effects.details import ContractBalanceDetails, FootprintDetails
from stellar_effects.effects.effect_types import EffectType
from stellar_effects.effects.models import EffectDraft
from stellar_effects.processing.state_diff import EntryDiff


def _delta(diff: EntryDiff, field: str) -> int:
    before = getattr(diff.before_data, field) if diff.before else 0
    after = getattr(diff.after_data, field) if diff.after else 0
    return after - before


def _balance_effect(account: str, asset: Asset, delta: int) -> EffectDraft:
    if delta > 0:
        return credit(MuxedAccount(account), asset, delta)
    return debit(MuxedAccount(account), asset, -delta)


def invoke_host_function(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    drafts = []
    for diff in diffs:
        if diff.entry_type == EntryType.ACCOUNT:
            delta = _delta(diff, "balance")
            if delta:
                account = (diff.after_data or diff.before_data).account_id
                drafts.append(_balance_effect(account, Asset.native(), delta))
        elif diff.entry_type == EntryType.TRUSTLINE:
            line = diff.after_data or diff.before_data
            if line.asset.is_pool_share:
                continue
            delta = _delta(diff, "balance")
            if delta:
                drafts.append(_balance_effect(line.account_id, line.asset, delta))
        elif diff.entry_type == EntryType.CONTRACT_DATA:
            state = diff.after_data or diff.before_data
            delta = _delta(diff, "amount")
            if not delta:
                continue
            effect_type = EffectType.CONTRACT_CREDITED if delta > 0 else EffectType.CONTRACT_DEBITED
            details = ContractBalanceDetails(state.holder, state.contract_id, abs(delta))
            drafts.append(EffectDraft.for_account(effect_type, op.source_account, details))
    return drafts


def extend_footprint_ttl(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    details = FootprintDetails(tuple(op.body.footprint_read_only), op.body.extend_to)
    return [EffectDraft.for_account(EffectType.EXTEND_FOOTPRINT_TTL, op.source_account, details)]


def restore_footprint(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    details = FootprintDetails(tuple(op.body.footprint_read_write))
    return [EffectDraft.for_account(EffectType.RESTORE_FOOTPRINT, op.source_account, details)]
