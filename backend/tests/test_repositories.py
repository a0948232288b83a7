from domain.models import Album, Group, PhotoEntry
from repositories import AlbumsRepository, GroupsRepository

albums_repo = AlbumsRepository()
groups_repo = GroupsRepository()


def _group(gid: str = "g1", color: str = "#ff6b9d") -> Group:
    return Group(id=gid, name=f"Kid {gid}", color=color, emoji="🐣")


def _album(aid: str, date: str, group_id: str = "g1", **kw) -> Album:
    return Album(id=aid, group_id=group_id, title=kw.pop("title", aid), date=date, **kw)


def test_upsert_inserts_then_replaces(session_factory):
    with session_factory() as session:
        groups_repo.upsert_group(session, _group())
        album = _album(
            "a1",
            "2024-03-01",
            weather="other",
            weather_emoji="🌡️",
            weather_custom="Foggy",
            photos=[PhotoEntry(id="p1", source_ref="/media/p1.jpg", caption="hi", width=10, height=20)],
        )
        albums_repo.upsert_album(session, album)

        album.title = "Renamed"
        album.photos.append(PhotoEntry(id="p2", source_ref="/media/p2.jpg"))
        albums_repo.upsert_album(session, album)

        stored = albums_repo.get_album(session, "a1")
        assert stored.title == "Renamed"
        assert [p.id for p in stored.photos] == ["p1", "p2"]
        assert stored.photos[0].caption == "hi"
        assert stored.photos[0].width == 10
        assert stored.weather_custom == "Foggy"
        assert len(albums_repo.list_albums(session)) == 1


def test_list_albums_newest_first_and_by_group(session_factory):
    with session_factory() as session:
        groups_repo.upsert_group(session, _group("g1"))
        groups_repo.upsert_group(session, _group("g2"))
        albums_repo.upsert_album(session, _album("old", "2023-05-01"))
        albums_repo.upsert_album(session, _album("new", "2024-05-01"))
        albums_repo.upsert_album(session, _album("other", "2024-01-01", group_id="g2"))

        assert [a.id for a in albums_repo.list_albums(session)] == ["new", "other", "old"]
        assert [a.id for a in albums_repo.list_albums_by_group(session, "g1")] == ["new", "old"]


def test_get_albums_keeps_requested_order_and_skips_unknown(session_factory):
    with session_factory() as session:
        groups_repo.upsert_group(session, _group())
        for aid, date in [("a", "2024-01-01"), ("b", "2024-02-01"), ("c", "2024-03-01")]:
            albums_repo.upsert_album(session, _album(aid, date))

        assert [a.id for a in albums_repo.get_albums(session, ["c", "zzz", "a"])] == ["c", "a"]
        assert albums_repo.get_albums(session, []) == []


def test_delete_album_returns_deleted(session_factory):
    with session_factory() as session:
        groups_repo.upsert_group(session, _group())
        albums_repo.upsert_album(session, _album("a", "2024-01-01"))

        deleted = albums_repo.delete_album(session, "a")
        assert deleted.id == "a"
        assert albums_repo.get_album(session, "a") is None
        assert albums_repo.delete_album(session, "a") is None


def test_delete_group_removes_its_albums(session_factory):
    with session_factory() as session:
        groups_repo.upsert_group(session, _group("g1"))
        groups_repo.upsert_group(session, _group("g2"))
        albums_repo.upsert_album(session, _album("a", "2024-01-01", group_id="g1"))
        albums_repo.upsert_album(session, _album("b", "2024-01-02", group_id="g2"))

        assert groups_repo.delete_group(session, "g1") == ["a"]
        assert [a.id for a in albums_repo.list_albums(session)] == ["b"]
        assert [g.id for g in groups_repo.list_groups(session)] == ["g2"]
        assert groups_repo.delete_group(session, "missing") == []


def test_theme_colors(session_factory):
    with session_factory() as session:
        groups_repo.upsert_group(session, _group("g1", "#111111"))
        groups_repo.upsert_group(session, _group("g2", "#222222"))
        assert groups_repo.theme_colors(session) == {"g1": "#111111", "g2": "#222222"}
