"""Cleaner for statements downloaded from Royal Bank of Canada.

RBC packs a lot of boilerplate into the NAME and MEMO fields (reference
numbers, channel prefixes, currency conversion notes). The rules below either
rewrite well-known record shapes to a fixed description or strip the noisy
field so that recurring purchases produce the same description every month.
"""

import re
from typing import Callable

from cleaners.base import TransactionCleaner
from cleaners.rules import AmountRule, TransactionMatchRule, normalize_field
from models.transaction import RawTransaction, Transaction, TransactionType

RBC_BANK_ID = "900000100"
RBC_INSTITUTION_NAME = "Royal Bank Canada"


def _build(raw: RawTransaction, type: TransactionType, description: str) -> Transaction:
    return Transaction(
        type=type,
        date=raw.date,
        amount=raw.amount,
        description=description,
    )


def _fixed(type: TransactionType, description: str) -> Callable[[RawTransaction], Transaction]:
    """Transform that always produces the given type and description."""
    return lambda raw: _build(raw, type, description)


def _keep_type(description: str) -> Callable[[RawTransaction], Transaction]:
    """Transform that keeps the record's own type with a fixed description."""
    return lambda raw: _build(raw, TransactionType.from_code(raw.type), description)


def _inter_account_transfer(raw: RawTransaction) -> Transaction:
    if raw.amount < 0:
        description = "TRANSFER OUT OF ACCOUNT"
    else:
        description = "TRANSFER INTO ACCOUNT"
    return _build(raw, TransactionType.XFER, description)


def _bill_payment(raw: RawTransaction) -> Transaction:
    # memo looks like "WWW PAYMENT - 1234 HYDRO ONE"; keep the payee
    payee = re.sub(r"^WWW PAYMENT - \d+\s*", "", normalize_field(raw.memo))
    return _build(raw, TransactionType.DEBIT, payee)


def _usd_purchase(raw: RawTransaction) -> Transaction:
    return _build(
        raw,
        TransactionType.from_code(raw.type),
        f"{normalize_field(raw.name)} (USD PURCHASE)".strip(),
    )


def _name_only(type: TransactionType = None) -> Callable[[RawTransaction], Transaction]:
    def transform(raw: RawTransaction) -> Transaction:
        return _build(raw, type or TransactionType.from_code(raw.type), normalize_field(raw.name))

    return transform


def _memo_only(type: TransactionType = None) -> Callable[[RawTransaction], Transaction]:
    def transform(raw: RawTransaction) -> Transaction:
        return _build(raw, type or TransactionType.from_code(raw.type), normalize_field(raw.memo))

    return transform


_SPENT = AmountRule.less_than(0)
_RECEIVED = AmountRule.greater_than(0)


class RbcTransactionCleaner(TransactionCleaner):
    """Tidies up transactions imported from RBC."""

    bank_id = RBC_BANK_ID
    institution_name = RBC_INSTITUTION_NAME

    rules = (
        # inter-account transfer
        TransactionMatchRule(_inter_account_transfer, name=r"WWW TRF DDA - \d+.*"),
        TransactionMatchRule(_inter_account_transfer, memo=r"WWW TRANSFER - \d+.*"),
        TransactionMatchRule(_inter_account_transfer, name=r"WWW TFR TIN0.*"),
        # scheduled transfer from one account to a line of credit
        TransactionMatchRule(
            _fixed(TransactionType.XFER, "LINE OF CREDIT PAYMENT"),
            type=TransactionType.DEBIT,
            amount=_SPENT,
            memo=r"WWW LOAN PMT - \d+.*",
        ),
        # scheduled transfer to a line of credit from another account
        TransactionMatchRule(
            _fixed(TransactionType.XFER, "LINE OF CREDIT PAYMENT"),
            type=TransactionType.CREDIT,
            amount=_RECEIVED,
            name=r"WWW PMT TIN0.*",
        ),
        # credit card payment
        TransactionMatchRule(
            _fixed(TransactionType.XFER, "CREDIT CARD PAYMENT"),
            type=TransactionType.CREDIT,
            amount=_RECEIVED,
            name=r"PAYMENT - THANK YOU.*",
        ),
        # online bill payment
        TransactionMatchRule(
            _bill_payment,
            type=TransactionType.DEBIT,
            amount=_SPENT,
            memo=r"WWW PAYMENT - \d+.*",
        ),
        # wire transfer
        TransactionMatchRule(_keep_type("WIRE TRANSFER"), name=r"FUNDS TRANSFER CR"),
        # incoming Interac e-transfer
        TransactionMatchRule(
            _fixed(TransactionType.CREDIT, "INCOMING INTERAC E-TRANSFER AUTO-DEPOSIT"),
            type=TransactionType.CREDIT,
            amount=_RECEIVED,
            name=r"E-TRF AUTODEPOSIT",
        ),
        TransactionMatchRule(
            _fixed(TransactionType.CREDIT, "INCOMING INTERAC E-TRANSFER"),
            type=TransactionType.CREDIT,
            amount=_RECEIVED,
            name=r"EMAIL TRFS CAN.*",
            memo=r"INT E-TRF CAN.*",
        ),
        TransactionMatchRule(
            _fixed(TransactionType.CREDIT, "INCOMING INTERAC E-TRANSFER"),
            type=TransactionType.CREDIT,
            amount=_RECEIVED,
            name=r"EMAIL TRFS.*",
            memo=r"INTERAC E-TRF-.*",
        ),
        # outgoing Interac e-transfer
        TransactionMatchRule(
            _fixed(TransactionType.DEBIT, "OUTGOING INTERAC E-TRANSFER"),
            type=TransactionType.DEBIT,
            amount=_SPENT,
            memo=r"INTERAC E-TRF-\s\d*",
        ),
        TransactionMatchRule(
            _fixed(TransactionType.DEBIT, "OUTGOING INTERAC E-TRANSFER"),
            type=TransactionType.DEBIT,
            amount=_SPENT,
            memo=r"E-TRANSFER SENT",
        ),
        # e-transfer service charges
        TransactionMatchRule(
            _fixed(TransactionType.FEE, "INTERAC E-TRANSFER SERVICE CHARGE"),
            type=TransactionType.DEBIT,
            amount=_SPENT,
            name=r"INTERAC-SC-\d+",
        ),
        TransactionMatchRule(
            _fixed(TransactionType.FEE, "INTERAC E-TRANSFER SERVICE CHARGE"),
            type=TransactionType.DEBIT,
            amount=_SPENT,
            name=r"INT E-TRF FEE\s*",
        ),
        # cancelled and refunded e-transfer
        TransactionMatchRule(
            _fixed(TransactionType.CREDIT, "CANCELLED INTERAC E-TRANSFER"),
            type=TransactionType.CREDIT,
            amount=_RECEIVED,
            memo=r"E-TRANSFER CANCEL",
        ),
        # personal loan repayment
        TransactionMatchRule(
            _fixed(TransactionType.DEBIT, "PERSONAL LOAN REPAYMENT"),
            type=TransactionType.DEBIT,
            amount=_SPENT,
            name=r"PERSONAL LOAN",
        ),
        # memo like "5.00 USD @ 1.308000000000" confuses matching, keep the merchant
        TransactionMatchRule(
            _usd_purchase,
            type=TransactionType.DEBIT,
            amount=_SPENT,
            memo=r"\d*\.\d*\sUSD*\s@\s\d*.\d*",
        ),
        # Interac purchase, reported as both DEBIT and POS
        TransactionMatchRule(
            _name_only(TransactionType.DEBIT),
            amount=_SPENT,
            memo=r"IDP PURCHASE\s*-\s*\d+.*",
        ),
        TransactionMatchRule(
            _memo_only(TransactionType.DEBIT),
            type=TransactionType.DEBIT,
            amount=_SPENT,
            name=r"WWWINTERAC PUR.*",
        ),
        # contactless Interac purchase
        TransactionMatchRule(
            _memo_only(),
            type=TransactionType.DEBIT,
            amount=_SPENT,
            name=r"C-IDP PURCHASE\s*-\s*\d+.*",
        ),
        # ATM withdrawal
        TransactionMatchRule(
            _fixed(TransactionType.DEBIT, "ATM WITHDRAWAL"),
            type=TransactionType.ATM,
            amount=_SPENT,
            memo=r"PTB CB WD-.*",
        ),
        TransactionMatchRule(
            _fixed(TransactionType.DEBIT, "ATM WITHDRAWAL"),
            type=TransactionType.ATM,
            amount=_SPENT,
            memo=r"PTB WD ---.*",
        ),
        # ATM deposit
        TransactionMatchRule(
            _fixed(TransactionType.CREDIT, "ATM DEPOSIT"),
            type=TransactionType.ATM,
            amount=_RECEIVED,
            memo=r"PTB DEP --.*",
        ),
        # miscellaneous payment, the name field says nothing useful
        TransactionMatchRule(_memo_only(), name=r"MISC PAYMENT"),
    )

    discard_patterns = (
        # purchase reference numbers
        re.compile(r"IDP PURCHASE\s*-\s*\d+.*"),
        re.compile(r"C-IDP PURCHASE\s*-\s*\d+.*"),
        re.compile(r"POS PURCHASE\s*-\s*\d+.*"),
        # bare confirmation / reference numbers
        re.compile(r"(REF|CONF)?\s*#?\s*\d{4,}"),
    )

    replace_rules = (
        (re.compile(r"(ONLINE BANKING|WWW|MOBILE) (TRANSFER|TRF) - \d+.*"), "INTERBANK TRANSFER"),
        (re.compile(r"INTERBANK (TRANSFER|TRF|XFER).*"), "INTERBANK TRANSFER"),
        (re.compile(r"PAYROLL DEP.*"), "PAYROLL DEPOSIT"),
        (re.compile(r"MONTHLY FEE.*"), "MONTHLY FEE"),
    )
