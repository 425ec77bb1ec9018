"""Tests for the resource clients."""

from unittest.mock import AsyncMock, MagicMock
from urllib.parse import parse_qsl

import pytest

from modloom.client import ModioClient
from modloom.constants import ReportResource, ReportType, TagType, TargetPlatform
from modloom.exceptions import BuilderError
from modloom.filters import NAME
from modloom.models import (
    Comment,
    Dependency,
    Event,
    File,
    Game,
    GameStatistics,
    Message,
    Mod,
    Rating,
    Statistics,
    Tag,
    TagOption,
    TeamMember,
    UploadPart,
    UploadSession,
    User,
)
from modloom.multipart import Form, StreamBody
from modloom.pagination import Query
from modloom.resources import (
    AddFileOptions,
    AddModOptions,
    CommentsClient,
    EditFileOptions,
    EditModOptions,
    FilesClient,
    GamesClient,
    MeClient,
    ModsClient,
    ReportsClient,
    UploadsClient,
)
from modloom.resources.base_client import form_fields
from modloom.resources.mods_client import metadata_fields
from modloom.routing import Routes
from modloom.upload import ContentRange


@pytest.fixture
def api_client(settings):
    """A ModioClient with a mocked request pipeline."""
    client = ModioClient(settings, api_key="k", token="t")
    client.request = AsyncMock(return_value=None)
    return client


def test_resource_clients_are_exposed(api_client):
    assert isinstance(api_client.games, GamesClient)
    assert isinstance(api_client.mods, ModsClient)
    assert isinstance(api_client.files, FilesClient)
    assert isinstance(api_client.me, MeClient)
    assert isinstance(api_client.uploads, UploadsClient)
    assert isinstance(api_client.comments, CommentsClient)
    assert isinstance(api_client.reports, ReportsClient)
    assert api_client.mods._api_client is api_client


class TestGamesClient:
    @pytest.mark.asyncio
    async def test_get(self, api_client):
        await api_client.games.get(5, show_hidden_tags=True)
        api_client.request.assert_awaited_once_with(Routes.get_game(5, True), model=Game)

    @pytest.mark.asyncio
    async def test_stats(self, api_client):
        await api_client.games.stats(5)
        api_client.request.assert_awaited_once_with(
            Routes.get_game_stats(5), model=GameStatistics
        )

    def test_list_and_tags_are_queries(self, api_client):
        games = api_client.games.list(NAME.eq("a"))
        tags = api_client.games.tags(5)

        assert isinstance(games, Query)
        assert games._route == Routes.get_games()
        assert games._filter == NAME.eq("a")
        assert games._model is Game
        assert tags._route == Routes.get_game_tags(5)
        assert tags._model is TagOption


class TestModsClient:
    @pytest.mark.asyncio
    async def test_get_delete_and_stats(self, api_client):
        await api_client.mods.get(5, 19)
        await api_client.mods.delete(5, 19)
        await api_client.mods.stats(5, 19)

        calls = api_client.request.await_args_list
        assert calls[0].args == (Routes.get_mod(5, 19),)
        assert calls[0].kwargs == {"model": Mod}
        assert calls[1].args == (Routes.delete_mod(5, 19),)
        assert calls[2].kwargs == {"model": Statistics}

    @pytest.mark.asyncio
    async def test_subscribe_and_unsubscribe(self, api_client):
        await api_client.mods.subscribe(5, 19)
        await api_client.mods.unsubscribe(5, 19)

        calls = api_client.request.await_args_list
        assert calls[0].args == (Routes.subscribe_to_mod(5, 19),)
        assert calls[0].kwargs == {"model": Mod}
        assert calls[1].args == (Routes.unsubscribe_from_mod(5, 19),)

    def test_queries(self, api_client):
        assert api_client.mods.list(5)._route == Routes.get_mods(5)
        assert api_client.mods.events(5)._route == Routes.get_mods_events(5)
        assert api_client.mods.events(5, 19)._route == Routes.get_mod_events(5, 19)
        assert api_client.mods.events(5)._model is Event
        assert api_client.mods.all_stats(5)._model is Statistics

        dependencies = api_client.mods.dependencies(5, 19, recursive=True)
        assert dependencies._route == Routes.get_mod_dependencies(5, 19, True)
        assert dependencies._model is Dependency


class TestFilesClient:
    @pytest.mark.asyncio
    async def test_get_and_delete(self, api_client):
        await api_client.files.get(5, 19, 3)
        await api_client.files.delete(5, 19, 3)

        calls = api_client.request.await_args_list
        assert calls[0].args == (Routes.get_file(5, 19, 3),)
        assert calls[0].kwargs == {"model": File}
        assert calls[1].args == (Routes.delete_file(5, 19, 3),)

    @pytest.mark.asyncio
    async def test_edit_renders_form_values(self, api_client):
        await api_client.files.edit(
            5, 19, 3, EditFileOptions(active=False, changelog="Fixes")
        )

        api_client.request.assert_awaited_once_with(
            Routes.edit_file(5, 19, 3),
            model=File,
            body={"active": "false", "changelog": "Fixes"},
        )

    @pytest.mark.asyncio
    async def test_add_with_local_file(self, api_client, tmp_path):
        path = tmp_path / "release.zip"
        path.write_bytes(b"PK")

        await api_client.files.add(
            5, 19, AddFileOptions(version="2.0", filehash="abc"), file=path
        )

        call = api_client.request.await_args
        assert call.args == (Routes.add_file(5, 19),)
        assert call.kwargs["model"] is File
        form = call.kwargs["body"]
        assert isinstance(form, Form)
        assert [name for name, _ in form.fields] == [
            "filedata",
            "version",
            "input_json",
        ]
        filedata = form.fields[0][1]
        assert filedata.filename == "release.zip"
        assert filedata.mime_type == "application/octet-stream"
        assert form.fields[-1][1].body.value == b'{"filehash":"abc","version":"2.0"}'

    @pytest.mark.asyncio
    async def test_add_with_upload_id(self, api_client):
        await api_client.files.add(
            5, 19, AddFileOptions(active=True, filehash="abc"), upload_id="u-1"
        )

        form = api_client.request.await_args.kwargs["body"]
        assert [name for name, _ in form.fields] == ["upload_id", "active", "input_json"]
        assert form.fields[0][1].body.value == b"u-1"
        assert (
            form.fields[-1][1].body.value
            == b'{"upload_id":"u-1","active":true,"filehash":"abc"}'
        )

    @pytest.mark.asyncio
    async def test_add_requires_exactly_one_source(self, api_client, tmp_path):
        with pytest.raises(BuilderError):
            await api_client.files.add(5, 19)
        with pytest.raises(BuilderError):
            await api_client.files.add(5, 19, file=tmp_path / "a.zip", upload_id="u")
        api_client.request.assert_not_awaited()

    def test_list(self, api_client):
        query = api_client.files.list(5, 19)
        assert query._route == Routes.get_files(5, 19)
        assert query._model is File


class TestMeClient:
    @pytest.mark.asyncio
    async def test_get(self, api_client):
        await api_client.me.get()
        api_client.request.assert_awaited_once_with(Routes.user_authenticated(), model=User)

    @pytest.mark.parametrize(
        ("method", "route", "model"),
        [
            ("subscriptions", Routes.user_subscriptions(), Mod),
            ("games", Routes.user_games(), Game),
            ("mods", Routes.user_mods(), Mod),
            ("files", Routes.user_files(), File),
            ("events", Routes.user_events(), Event),
            ("ratings", Routes.user_ratings(), Rating),
            ("muted", Routes.user_muted(), User),
        ],
    )
    def test_queries(self, api_client, method, route, model):
        query = getattr(api_client.me, method)()
        assert query._route == route
        assert query._model is model


class TestUploadsClient:
    @pytest.mark.asyncio
    async def test_create(self, api_client):
        await api_client.uploads.create(5, 19, "mod.zip")
        api_client.request.assert_awaited_once_with(
            Routes.create_multipart_upload_session(5, 19),
            model=UploadSession,
            body={"filename": "mod.zip", "nonce": None},
        )

    @pytest.mark.asyncio
    async def test_add_part(self, api_client):
        source = [b"abc"]

        await api_client.uploads.add_part(5, 19, "u", ContentRange(0, 2, 3), source)

        call = api_client.request.await_args
        assert call.args == (Routes.add_multipart_upload_part(5, 19, "u"),)
        assert call.kwargs["model"] is UploadPart
        assert call.kwargs["body"] == StreamBody(source)
        assert call.kwargs["headers"] == {"Content-Range": "bytes 0-2/3", "Content-Length": "3"}

    @pytest.mark.asyncio
    async def test_complete_and_delete(self, api_client):
        await api_client.uploads.complete(5, 19, "u")
        await api_client.uploads.delete(5, 19, "u")

        calls = api_client.request.await_args_list
        assert calls[0].args == (Routes.complete_multipart_upload_session(5, 19, "u"),)
        assert calls[0].kwargs == {"model": UploadSession}
        assert calls[1].args == (Routes.delete_multipart_upload_session(5, 19, "u"),)

    def test_queries(self, api_client):
        assert api_client.uploads.sessions(5, 19)._route == Routes.get_multipart_upload_sessions(
            5, 19
        )
        parts = api_client.uploads.parts(5, 19, "u")
        assert parts._route == Routes.get_multipart_upload_parts(5, 19, "u")
        assert parts._model is UploadPart


@pytest.mark.asyncio
async def test_uploader_delegates_to_uploads_client(api_client):
    api_client.uploads.create = AsyncMock(return_value=MagicMock(upload_id="u-9"))
    uploader = api_client.upload(5, 19, "mod.zip", nonce="n")

    await uploader.start()

    api_client.uploads.create.assert_awaited_once_with(5, 19, "mod.zip", nonce="n")
    assert uploader.upload_id == "u-9"


def test_form_fields_renders_scalars_and_arrays():
    fields = form_fields(
        {"name": "Maps", "hidden": False, "tags": ["a", "b"], "locked": None, "count": 2}
    )
    assert fields == {"name": "Maps", "hidden": "false", "tags[]": ["a", "b"], "count": "2"}


def test_metadata_fields_are_sorted_and_flattened():
    metadata = {"smg": ["1200"], "pistol": ["800", "850"], "old": []}

    assert metadata_fields(metadata, keys_only=False) == [
        "pistol:800",
        "pistol:850",
        "smg:1200",
    ]
    assert metadata_fields(metadata, keys_only=True) == [
        "old",
        "pistol:800",
        "pistol:850",
        "smg:1200",
    ]


class TestGameWrites:
    @pytest.mark.asyncio
    async def test_add_tags(self, api_client):
        await api_client.games.add_tags(
            5, "Theme", TagType.CHECKBOXES, ["Dark", "Light"], hidden=True
        )

        api_client.request.assert_awaited_once_with(
            Routes.add_game_tags(5),
            model=Message,
            body={
                "name": "Theme",
                "type": "checkboxes",
                "hidden": "true",
                "tags[]": ["Dark", "Light"],
            },
        )

    @pytest.mark.asyncio
    async def test_delete_tags_and_whole_group(self, api_client):
        await api_client.games.delete_tags(5, "Theme", ["Dark"])
        await api_client.games.delete_tags(5, "Theme")

        calls = api_client.request.await_args_list
        assert calls[0].args == (Routes.delete_game_tags(5),)
        assert calls[0].kwargs == {"body": {"name": "Theme", "tags[]": ["Dark"]}}
        assert calls[1].kwargs == {"body": {"name": "Theme", "tags[]": [""]}}

    @pytest.mark.asyncio
    async def test_rename_tag(self, api_client):
        await api_client.games.rename_tag(5, "Dark", "Night")
        api_client.request.assert_awaited_once_with(
            Routes.rename_game_tags(5), model=Message, body={"from": "Dark", "to": "Night"}
        )

    @pytest.mark.asyncio
    async def test_add_media(self, api_client, tmp_path):
        await api_client.games.add_media(5, icon=tmp_path / "icon.png", header=tmp_path / "h.jpg")

        call = api_client.request.await_args
        assert call.args == (Routes.add_game_media(5),)
        assert call.kwargs["model"] is Message
        form = call.kwargs["body"]
        assert [name for name, _ in form.fields] == ["icon", "header"]
        assert form.fields[1][1].filename == "h.jpg"
        assert all(part.mime_type == "image/*" for _, part in form.fields)

    @pytest.mark.asyncio
    async def test_add_media_requires_an_image(self, api_client):
        with pytest.raises(BuilderError):
            await api_client.games.add_media(5)
        api_client.request.assert_not_awaited()


class TestModWrites:
    @pytest.mark.asyncio
    async def test_add(self, api_client, tmp_path):
        options = AddModOptions(name="Better Maps", summary="Maps.", visible=1, tags=["a", "b"])

        await api_client.mods.add(5, options, tmp_path / "logo.png")

        call = api_client.request.await_args
        assert call.args == (Routes.add_mod(5),)
        assert call.kwargs["model"] is Mod
        form = call.kwargs["body"]
        assert [name for name, _ in form.fields] == [
            "name",
            "summary",
            "logo",
            "visible",
            "tags[]",
            "tags[]",
            "input_json",
        ]
        assert form.fields[2][1].mime_type == "image/*"
        assert form.fields[-1][1].body.value == (
            b'{"name":"Better Maps","summary":"Maps.","visible":1,"tags":["a","b"]}'
        )

    @pytest.mark.asyncio
    async def test_edit(self, api_client):
        await api_client.mods.edit(5, 19, EditModOptions(summary="New.", tags=["x"]))

        api_client.request.assert_awaited_once_with(
            Routes.edit_mod(5, 19), model=Mod, body={"summary": "New.", "tags[]": ["x"]}
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [-1, 0, 1])
    async def test_rate(self, api_client, rating):
        await api_client.mods.rate(5, 19, rating)
        api_client.request.assert_awaited_once_with(
            Routes.rate_mod(5, 19), model=Message, body={"rating": str(rating)}
        )

    @pytest.mark.asyncio
    async def test_rate_rejects_other_values(self, api_client):
        with pytest.raises(BuilderError):
            await api_client.mods.rate(5, 19, 5)
        api_client.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_dependencies(self, api_client):
        await api_client.mods.add_dependencies(5, 19, [20, 21], replace=True)
        await api_client.mods.delete_dependencies(5, 19, [21])

        calls = api_client.request.await_args_list
        assert calls[0].args == (Routes.add_mod_dependencies(5, 19),)
        assert calls[0].kwargs == {
            "model": Message,
            "body": {"dependencies[]": ["20", "21"], "sync": "true"},
        }
        assert calls[1].args == (Routes.delete_mod_dependencies(5, 19),)
        assert calls[1].kwargs == {"body": {"dependencies[]": ["21"]}}

    @pytest.mark.asyncio
    async def test_tags(self, api_client):
        await api_client.mods.add_tags(5, 19, ["Dark"])
        await api_client.mods.delete_tags(5, 19, ["Light"])

        calls = api_client.request.await_args_list
        assert calls[0].args == (Routes.add_mod_tags(5, 19),)
        assert calls[0].kwargs == {"model": Message, "body": {"tags[]": ["Dark"]}}
        assert calls[1].args == (Routes.delete_mod_tags(5, 19),)
        assert calls[1].kwargs == {"body": {"tags[]": ["Light"]}}

        query = api_client.mods.tags(5, 19)
        assert query._route == Routes.get_mod_tags(5, 19)
        assert query._model is Tag

    @pytest.mark.asyncio
    async def test_metadata_writes(self, api_client):
        await api_client.mods.add_metadata(5, 19, {"dmg": ["800"]})
        await api_client.mods.delete_metadata(5, 19, {"dmg": [], "rof": ["3"]})

        calls = api_client.request.await_args_list
        assert calls[0].args == (Routes.add_mod_metadata(5, 19),)
        assert calls[0].kwargs == {"model": Message, "body": {"metadata[]": ["dmg:800"]}}
        assert calls[1].args == (Routes.delete_mod_metadata(5, 19),)
        assert calls[1].kwargs == {"body": {"metadata[]": ["dmg", "rof:3"]}}

    def test_team(self, api_client):
        query = api_client.mods.team(5, 19)
        assert query._route == Routes.get_mod_team_members(5, 19)
        assert query._model is TeamMember

    @pytest.mark.asyncio
    async def test_add_media(self, api_client, tmp_path):
        await api_client.mods.add_media(
            5,
            19,
            logo=tmp_path / "logo.png",
            images=[tmp_path / "a.png", tmp_path / "b.png"],
            youtube=["https://youtu.be/x"],
            replace=False,
        )

        call = api_client.request.await_args
        assert call.args == (Routes.add_mod_media(5, 19),)
        form = call.kwargs["body"]
        assert [name for name, _ in form.fields] == [
            "sync",
            "logo",
            "image0",
            "image1",
            "youtube[]",
        ]
        assert form.fields[0][1].body.value == b"false"
        assert form.fields[3][1].filename == "b.png"

    @pytest.mark.asyncio
    async def test_delete_and_reorder_media(self, api_client):
        await api_client.mods.delete_media(5, 19, images=["a.png"])
        await api_client.mods.reorder_media(5, 19, images=["b.png", "a.png"], sketchfab=["s"])

        calls = api_client.request.await_args_list
        assert calls[0].args == (Routes.delete_mod_media(5, 19),)
        assert calls[0].kwargs == {"body": {"images[]": ["a.png"]}}
        assert calls[1].args == (Routes.reorder_mod_media(5, 19),)
        assert calls[1].kwargs == {
            "body": {"images[]": ["b.png", "a.png"], "sketchfab[]": ["s"]}
        }


class TestCommentsClient:
    @pytest.mark.asyncio
    async def test_get_add_edit_delete(self, api_client):
        await api_client.comments.get(5, 19, 7)
        await api_client.comments.add(5, 19, "Nice!", reply_id=7)
        await api_client.comments.edit(5, 19, 8, "Very nice!")
        await api_client.comments.delete(5, 19, 8)

        calls = api_client.request.await_args_list
        assert calls[0].args == (Routes.get_mod_comment(5, 19, 7),)
        assert calls[0].kwargs == {"model": Comment}
        assert calls[1].args == (Routes.add_mod_comment(5, 19),)
        assert calls[1].kwargs == {"model": Comment, "body": {"content": "Nice!", "reply_id": 7}}
        assert calls[2].args == (Routes.edit_mod_comment(5, 19, 8),)
        assert calls[2].kwargs == {"model": Comment, "body": {"content": "Very nice!"}}
        assert calls[3].args == (Routes.delete_mod_comment(5, 19, 8),)

    @pytest.mark.asyncio
    async def test_karma(self, api_client):
        await api_client.comments.karma(5, 19, 7)
        await api_client.comments.karma(5, 19, 7, positive=False)

        calls = api_client.request.await_args_list
        assert calls[0].args == (Routes.update_mod_comment_karma(5, 19, 7),)
        assert calls[0].kwargs["body"] == {"karma": "1"}
        assert calls[1].kwargs["body"] == {"karma": "-1"}

    def test_list(self, api_client):
        query = api_client.comments.list(5, 19)
        assert query._route == Routes.get_mod_comments(5, 19)
        assert query._model is Comment


@pytest.mark.asyncio
async def test_manage_platforms(api_client):
    await api_client.files.manage_platforms(
        5, 19, 3, approved=[TargetPlatform.WINDOWS, TargetPlatform.LINUX]
    )

    api_client.request.assert_awaited_once_with(
        Routes.manage_platform_status(5, 19, 3),
        model=File,
        body={"approved[]": ["windows", "linux"]},
    )


@pytest.mark.asyncio
async def test_mute_and_unmute(api_client):
    await api_client.me.mute_user(42)
    await api_client.me.unmute_user(42)

    calls = api_client.request.await_args_list
    assert calls[0].args == (Routes.mute_user(42),)
    assert calls[1].args == (Routes.unmute_user(42),)


@pytest.mark.asyncio
async def test_submit_report(api_client):
    await api_client.reports.submit(
        ReportResource.MODS, 19, ReportType.DMCA, "Stolen assets.", name="Alice"
    )

    api_client.request.assert_awaited_once_with(
        Routes.submit_report(),
        model=Message,
        body={
            "resource": "mods",
            "id": "19",
            "type": "1",
            "summary": "Stolen assets.",
            "name": "Alice",
            "contact": None,
        },
    )


class TestOnTheWire:
    """Form bodies as they leave the client."""

    @pytest.mark.asyncio
    async def test_repeated_array_fields(self, token_client, httpx_mock):
        httpx_mock.add_response(json={"code": 201, "message": "Metadata added."})

        message = await token_client.mods.add_metadata(5, 19, {"dmg": ["800", "850"]})

        assert message == Message(code=201, message="Metadata added.")
        request = httpx_mock.get_request()
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert parse_qsl(request.content.decode()) == [
            ("metadata[]", "dmg:800"),
            ("metadata[]", "dmg:850"),
        ]

    @pytest.mark.asyncio
    async def test_report_omits_unset_fields(self, token_client, httpx_mock):
        httpx_mock.add_response(json={"code": 200, "message": "Report submitted."})

        await token_client.reports.submit(
            ReportResource.USERS, 42, ReportType.GENERIC, "Spam."
        )

        request = httpx_mock.get_request()
        assert request.headers["Authorization"] == "Bearer test-token"
        assert dict(parse_qsl(request.content.decode())) == {
            "resource": "users",
            "id": "42",
            "type": "0",
            "summary": "Spam.",
        }

    @pytest.mark.asyncio
    async def test_metadata_is_grouped_across_pages(self, client, httpx_mock, list_json):
        pairs = [
            {"metakey": "dmg", "metavalue": "800"},
            {"metakey": "rof", "metavalue": "3"},
            {"metakey": "dmg", "metavalue": "850"},
        ]
        httpx_mock.add_response(json=list_json(pairs[:2], total=3, limit=2))
        httpx_mock.add_response(json=list_json(pairs[2:], total=3, offset=2, limit=2))
        httpx_mock.add_response(json=list_json([], total=3, offset=3, limit=2))

        metadata = await client.mods.metadata(5, 19)

        assert metadata == {"dmg": ["800", "850"], "rof": ["3"]}

    @pytest.mark.asyncio
    async def test_comment_model(self, client, httpx_mock):
        httpx_mock.add_response(
            json={
                "id": 7,
                "resource_id": 19,
                "user": {"id": 1, "name_id": "alice", "username": "alice"},
                "date_added": 1499841487,
                "reply_id": 0,
                "thread_position": "01",
                "karma": 3,
                "content": "Nice!",
            }
        )

        comment = await client.comments.get(5, 19, 7)

        assert comment.karma == 3
        assert comment.user.username == "alice"
