"""Unit tests for credential secret change detection"""

import base64
import json

import kopf

from credmode.engine.diffbase import CredentialDiffBaseStorage, fingerprint
from credmode.interfaces.capabilities import ANNOTATION_KEY


def b64(value: str) -> str:
    return base64.b64encode(value.encode()).decode()


DATA = {
    "aws_access_key_id": b64("AKIAEXAMPLE"),
    "aws_secret_access_key": b64("secret-material"),
}


def secret_body(data=None, annotations=None, resource_version="100"):
    return kopf.Body({
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": {
            "name": "aws-creds",
            "namespace": "kube-system",
            "resourceVersion": resource_version,
            "annotations": dict(annotations or {}),
        },
        "type": "Opaque",
        "data": dict(DATA if data is None else data),
    })


class TestEssence:
    """Test what counts as a change of the credential secret"""

    def test_key_material_is_not_stored(self):
        """Test only digests of the data fields end up in the essence"""
        storage = CredentialDiffBaseStorage()

        essence = storage.build(body=secret_body())
        encoded = json.dumps(essence)

        for value in DATA.values():
            assert value not in encoded
        assert essence["data"]["aws_secret_access_key"] == fingerprint(DATA["aws_secret_access_key"])

    def test_mode_annotation_write_is_not_a_change(self):
        """Test our own annotation write does not trigger another round of checks"""
        storage = CredentialDiffBaseStorage()

        before = storage.build(body=secret_body())
        after = storage.build(body=secret_body(annotations={ANNOTATION_KEY: "mint"}, resource_version="101"))

        assert before == after

    def test_rotated_key_is_a_change(self):
        storage = CredentialDiffBaseStorage()
        rotated = dict(DATA, aws_secret_access_key=b64("rotated-material"))

        assert storage.build(body=secret_body()) != storage.build(body=secret_body(data=rotated))

    def test_removed_field_is_a_change(self):
        storage = CredentialDiffBaseStorage()
        partial = {"aws_access_key_id": DATA["aws_access_key_id"]}

        assert storage.build(body=secret_body()) != storage.build(body=secret_body(data=partial))


class TestWatchRestart:
    """Test a relisted secret is recognised as already handled"""

    def test_relist_after_watch_restart_matches_last_handled_state(self):
        """Test the stored essence equals the essence of the relisted object

        kopf relists secrets whenever its watch reconnects; an unchanged
        essence means no update handler runs and no cloud checks are made.
        """
        storage = CredentialDiffBaseStorage()
        handled = secret_body()
        patch = kopf.Patch()

        storage.store(body=handled, patch=patch, essence=storage.build(body=handled))

        stored_annotations = patch.get("metadata", {}).get("annotations", {})
        relisted = secret_body(
            annotations=dict(stored_annotations, **{ANNOTATION_KEY: "mint"}),
            resource_version="250",
        )

        assert storage.fetch(body=relisted) == storage.build(body=relisted)

    def test_relist_with_rotated_key_differs_from_last_handled_state(self):
        storage = CredentialDiffBaseStorage()
        handled = secret_body()
        patch = kopf.Patch()
        storage.store(body=handled, patch=patch, essence=storage.build(body=handled))

        stored_annotations = patch.get("metadata", {}).get("annotations", {})
        relisted = secret_body(
            data=dict(DATA, aws_access_key_id=b64("AKIAROTATED")),
            annotations=stored_annotations,
            resource_version="251",
        )

        assert storage.fetch(body=relisted) != storage.build(body=relisted)
