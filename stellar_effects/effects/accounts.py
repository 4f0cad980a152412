"""
Account-level derivations: create, merge, set options (incl. signers),
inflation, manage data and bump sequence.
"""

from __future__ import annotations

from stellar_effects.decoder.ledger_entries import data_key_id
from stellar_effects.decoder.models import (
    AccountMergeSuccess,
    AccountState,
    Asset,
    EntryType,
    InflationSuccess,
    MuxedAccount,
    Operation,
)
from stellar_effects.effects.common import Diffs, credit, debit, find_diff, success_payload
from stellar_effects.effects.details import (
    AccountCreatedDetails,
    AccountFlagsDetails,
    DataDetails,
    EmptyDetails,
    HomeDomainDetails,
    InflationDestinationDetails,
    SequenceBumpedDetails,
    SignerDetails,
    ThresholdsDetails,
)
from stellar_effects.effects.effect_types import EffectType
from stellar_effects.effects.models import EffectDraft
from stellar_effects.processing.state_diff import DIFF_CREATED, DIFF_REMOVED

AUTH_REQUIRED_FLAG = 1
AUTH_REVOCABLE_FLAG = 2
AUTH_IMMUTABLE_FLAG = 4
AUTH_CLAWBACK_ENABLED_FLAG = 8

DEFAULT_SIGNER_WEIGHT = 1


def create_account(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    body = op.body
    destination = MuxedAccount(body.destination)
    return [
        EffectDraft.for_account(
            EffectType.ACCOUNT_CREATED, destination, AccountCreatedDetails(body.starting_balance)
        ),
        debit(op.source_account, Asset.native(), body.starting_balance),
        EffectDraft.for_account(
            EffectType.SIGNER_CREATED,
            destination,
            SignerDetails(body.destination, DEFAULT_SIGNER_WEIGHT),
        ),
    ]


def account_merge(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    merged = success_payload(op, AccountMergeSuccess).source_account_balance
    native = Asset.native()
    return [
        debit(op.source_account, native, merged),
        credit(op.body.destination, native, merged),
        EffectDraft.for_account(EffectType.ACCOUNT_REMOVED, op.source_account, EmptyDetails()),
    ]


def inflation(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    payouts = success_payload(op, InflationSuccess).payouts
    native = Asset.native()
    return [credit(MuxedAccount(p.destination), native, p.amount) for p in payouts]


def _flag_details(set_flags: int | None, clear_flags: int | None) -> AccountFlagsDetails | None:
    values: dict[str, bool] = {}
    names = (
        (AUTH_REQUIRED_FLAG, "auth_required"),
        (AUTH_REVOCABLE_FLAG, "auth_revocable"),
        (AUTH_IMMUTABLE_FLAG, "auth_immutable"),
        (AUTH_CLAWBACK_ENABLED_FLAG, "auth_clawback_enabled"),
    )
    for flags, state in ((set_flags, True), (clear_flags, False)):
        if flags is None:
            continue
        for bit, name in names:
            if flags & bit:
                values[name] = state
    return AccountFlagsDetails(**values) if values else None


def signer_effects(source: MuxedAccount, before: AccountState, after: AccountState) -> list[EffectDraft]:
    """Removed / updated signers over the sorted before-set, then created over the sorted after-set."""
    old = before.signer_summary()
    new = after.signer_summary()
    drafts = []
    for key in sorted(old):
        if key not in new:
            drafts.append(EffectDraft.for_account(EffectType.SIGNER_REMOVED, source, SignerDetails(key)))
        elif new[key] != old[key]:
            drafts.append(EffectDraft.for_account(EffectType.SIGNER_UPDATED, source, SignerDetails(key, new[key])))
    for key in sorted(new):
        if key not in old:
            drafts.append(EffectDraft.for_account(EffectType.SIGNER_CREATED, source, SignerDetails(key, new[key])))
    return drafts


def set_options(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    body = op.body
    source = op.source_account
    drafts = []
    if body.home_domain is not None:
        drafts.append(
            EffectDraft.for_account(
                EffectType.ACCOUNT_HOME_DOMAIN_UPDATED, source, HomeDomainDetails(body.home_domain)
            )
        )
    if any(t is not None for t in (body.low_threshold, body.med_threshold, body.high_threshold)):
        drafts.append(
            EffectDraft.for_account(
                EffectType.ACCOUNT_THRESHOLDS_UPDATED,
                source,
                ThresholdsDetails(body.low_threshold, body.med_threshold, body.high_threshold),
            )
        )
    flags = _flag_details(body.set_flags, body.clear_flags)
    if flags is not None:
        drafts.append(EffectDraft.for_account(EffectType.ACCOUNT_FLAGS_UPDATED, source, flags))
    if body.inflation_dest is not None:
        drafts.append(
            EffectDraft.for_account(
                EffectType.ACCOUNT_INFLATION_DESTINATION_UPDATED,
                source,
                InflationDestinationDetails(body.inflation_dest),
            )
        )
    account = find_diff(diffs, EntryType.ACCOUNT, source.address)
    if account is not None and account.before is not None and account.after is not None:
        drafts.extend(signer_effects(source, account.before_data, account.after_data))
    return drafts


def manage_data(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    source = op.source_account
    diff = find_diff(diffs, EntryType.DATA, data_key_id(source.address, op.body.name))
    if diff is None:
        return []
    if diff.kind == DIFF_CREATED:
        details = DataDetails(op.body.name, diff.after_data.value)
        return [EffectDraft.for_account(EffectType.DATA_CREATED, source, details)]
    if diff.kind == DIFF_REMOVED:
        return [EffectDraft.for_account(EffectType.DATA_REMOVED, source, DataDetails(op.body.name))]
    details = DataDetails(op.body.name, diff.after_data.value)
    return [EffectDraft.for_account(EffectType.DATA_UPDATED, source, details)]


def bump_sequence(op: Operation, diffs: Diffs) -> list[EffectDraft]:
    source = op.source_account
    diff = find_diff(diffs, EntryType.ACCOUNT, source.address)
    if diff is None or diff.before is None or diff.after is None:
        return []
    if diff.before_data.sequence == diff.after_data.sequence:
        return []
    details = SequenceBumpedDetails(diff.after_data.sequence)
    return [EffectDraft.for_account(EffectType.SEQUENCE_BUMPED, source, details)]
