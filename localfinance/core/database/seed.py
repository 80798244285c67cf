"""Sample accounts for development databases.

Goes through AccountRepository.create so sample data obeys the same
validation, normalisation and stamping as user input.
"""

import logging
from decimal import Decimal

from localfinance.domain.models import AccountDraft
from localfinance.domain.value_objects.account_type import AccountType

logger = logging.getLogger(__name__)

SAMPLE_ACCOUNTS = [
    AccountDraft(
        label="Betaalrekening",
        type=AccountType.CHECKING,
        currency="EUR",
        iban="NL91ABNA0417164300",
        starting_balance=Decimal("1000.00"),
    ),
    AccountDraft(
        label="Spaarrekening",
        type=AccountType.SAVINGS,
        currency="EUR",
        iban="NL20INGB0001234567",
        starting_balance=Decimal("2500.00"),
    ),
    AccountDraft(
        label="Creditcard",
        type=AccountType.CREDIT,
        currency="EUR",
        iban="NL02ABNA0123456789",
        starting_balance=Decimal("0.00"),
    ),
]


async def seed_sample_accounts(account_repo) -> int:
    """
    Insert the sample accounts if the store holds none.

    Args:
        account_repo: AccountRepository to write through

    Returns:
        Number of accounts inserted (0 when the store was not empty)
    """
    existing = await account_repo.count()
    if existing:
        logger.debug(f"Skipping sample data, {existing} account(s) already stored")
        return 0

    for draft in SAMPLE_ACCOUNTS:
        await account_repo.create(draft)

    logger.info(f"Seeded {len(SAMPLE_ACCOUNTS)} sample accounts")
    return len(SAMPLE_ACCOUNTS)
