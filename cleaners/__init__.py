from types import MappingProxyType

from cleaners.base import TransactionCleaner
from cleaners.default import DEFAULT_BANK_ID, DefaultTransactionCleaner
from cleaners.rbc import RbcTransactionCleaner
from logger import get_logger

logger = get_logger(__name__)

# institution id -> cleaner constructor
_CLEANER_CLASSES = (
    DefaultTransactionCleaner,
    RbcTransactionCleaner,
)

_CLEANERS = MappingProxyType({cls.bank_id: cls() for cls in _CLEANER_CLASSES})


def get_cleaner(institution_id) -> TransactionCleaner:
    """Get the cleaner for an institution, falling back to the default cleaner."""
    cleaner = _CLEANERS.get(institution_id)
    if cleaner is not None:
        logger.debug(
            f"Using {type(cleaner).__name__} for institution {institution_id}"
        )
        return cleaner

    logger.warning(
        f"No cleaner available for institution {institution_id}, "
        f"using {DefaultTransactionCleaner.__name__}"
    )
    return _CLEANERS[DEFAULT_BANK_ID]


def get_available_cleaners():
    """Get list of institution ids that have a registered cleaner."""
    return list(_CLEANERS.keys())
