"""Tests for the mod.io response models."""

import pytest
from pydantic import ValidationError

from modloom.models import (
    ErrorResponse,
    File,
    Game,
    ListResponse,
    Mod,
    Terms,
    UploadSession,
    User,
)


def test_mod_with_primary_file(mod_json):
    mod = Mod.model_validate(mod_json())

    assert mod.modfile is not None
    assert mod.modfile.filehash.md5 == "5eb63bbbe01eeed093cb22bb8f5acdc3"
    assert mod.modfile.download.binary_url.startswith("https://files.example.com/")
    assert mod.submitted_by.username == "alice"


def test_empty_objects_decode_to_none(mod_json):
    mod = Mod.model_validate(mod_json(modfile={}, stats={}))

    assert mod.modfile is None
    assert mod.stats is None
    assert mod.submitted_by.avatar is None


def test_unknown_fields_are_kept(mod_json):
    mod = Mod.model_validate(mod_json(maturity_option=0, logo={"filename": "logo.png"}))
    assert mod.model_extra["maturity_option"] == 0


def test_file_requires_download(file_json):
    data = file_json()
    del data["download"]
    with pytest.raises(ValidationError):
        File.model_validate(data)


def test_list_response_aliases():
    envelope = ListResponse[User].model_validate(
        {
            "data": [{"id": 1, "name_id": "a", "username": "a"}],
            "result_count": 1,
            "result_offset": 20,
            "result_limit": 10,
            "result_total": 21,
        }
    )

    assert (envelope.count, envelope.offset, envelope.limit, envelope.total) == (1, 20, 10, 21)
    assert isinstance(envelope.data[0], User)


def test_error_response_defaults():
    envelope = ErrorResponse.model_validate({"error": {"code": 401, "message": "Unauthorized."}})

    assert envelope.error.error_ref == 0
    assert envelope.error.errors == {}


def test_game_defaults():
    game = Game.model_validate({"id": 5, "name": "Game", "name_id": "game"})
    assert game.tag_options == []
    assert game.ugc_name == "mods"


def test_terms_and_upload_session():
    terms = Terms.model_validate({"plaintext": "p", "html": "<p>p</p>"})
    session = UploadSession.model_validate({"upload_id": "u", "status": 2})

    assert terms.buttons == {}
    assert session.status == 2
