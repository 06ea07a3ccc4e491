from cleaners.base import TransactionCleaner

DEFAULT_BANK_ID = "default"


class DefaultTransactionCleaner(TransactionCleaner):
    """Cleaner used when the source institution is unrecognized.

    Runs no rules: name and memo are only trimmed, upper-cased and joined.
    """

    bank_id = DEFAULT_BANK_ID
    institution_name = "default"
