"""Challenge response — proves this site still holds its identifier.

The Seona platform calls the open /v1/authenticate endpoint during key
exchange. The site answers with its identifier encrypted under the key
authority's current public key; only the authority can decrypt it.
"""

import base64

from seona.auth.crypto import CryptoVerifier
from seona.auth.identity import IdentityStore
from seona.auth.keys import KeyProvider
from seona.errors import InternalFailure


async def build_challenge(
    identity: IdentityStore,
    keys: KeyProvider,
    verifier: CryptoVerifier,
) -> str:
    """Return base64(RSA-encrypt(identifier)).

    Raises UpstreamUnavailable if the key can't be fetched,
    InternalFailure if the site was never activated, and
    EncryptionFailed if encryption fails.
    """
    public_key = await keys.fetch_public_key()

    identifier = await identity.get_identifier()
    if identifier is None:
        raise InternalFailure("Site is not activated", code="not-activated")

    encrypted = verifier.encrypt_for_challenge(identifier, public_key)
    return base64.b64encode(encrypted).decode("ascii")
