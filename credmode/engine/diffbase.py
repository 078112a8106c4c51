"""Last-handled state of the credential secret for kopf change detection"""

from typing import Any, Dict, Iterable, Optional
import hashlib

import kopf


def fingerprint(value: str) -> str:
    """Digest of one base64-encoded secret field"""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


class CredentialDiffBaseStorage(kopf.AnnotationsDiffBaseStorage):
    """Annotation-backed diff base that never stores key material

    kopf fires update handlers only when the essence of an object differs from
    the last handled one. For the credential secret the essence is the set of
    data fields, each reduced to a digest. Metadata is left out, so watch
    relists and annotation writes (the mode annotation and kopf's own) are not
    changes; only new key material triggers a new round of cloud checks.
    """

    def build(
        self,
        *,
        body: kopf.Body,
        extra_fields: Optional[Iterable[Any]] = None,
    ) -> Dict[str, Any]:
        essence = dict(super().build(body=body, extra_fields=extra_fields))
        essence.pop("metadata", None)

        data = essence.get("data") or {}
        essence["data"] = {key: fingerprint(value) for key, value in sorted(data.items())}
        return essence
