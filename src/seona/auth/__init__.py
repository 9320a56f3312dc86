"""Request authentication for the Seona platform.

Learn: There are no users, passwords or tokens here. The site holds a
random identifier; the Seona platform holds an RSA private key whose
public half is published by the key authority. A request is trusted
when its Signature header verifies as an RSA-SHA512 signature of the
identifier under the currently published key.

Pieces, leaves first:
1. identity.IdentityStore — write-once identifier in the option store
2. keys.KeyProvider — fetches the public key over HTTP
3. crypto.CryptoVerifier — signature check + challenge encryption
4. gate.AuthenticationGate — combines the three into one decision
"""
