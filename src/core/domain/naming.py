"""Name derivations shared by the provisioning steps."""

from __future__ import annotations


def derive_tenant_name(org_display_name: str) -> str:
    """Normalize an organization display name into its tenant identifier.

    Lower-cases the name and replaces every space with a hyphen. Nothing else
    is stripped, so ``"Client A Inc."`` becomes ``"client-a-inc."``. Applying
    it twice gives the same result as applying it once.
    """

    return org_display_name.lower().replace(" ", "-")


def admin_local_part(admin_email: str) -> str:
    """Account name for the admin: everything before the first ``@``."""

    return admin_email.split("@", 1)[0]
