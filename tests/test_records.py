"""Tests for content records and snapshots."""

import pytest
from contentnav.core.groups import Group
from contentnav.core.records import ContentRecord, RecordSnapshot, paginate_records


def _record(source_file_dir: str, source_file_name: str, **fields: object) -> ContentRecord:
    fields.setdefault("body", "Body.")
    return ContentRecord(source_file_dir=source_file_dir, source_file_name=source_file_name, **fields)


class TestContentRecord:
    """Tests for ContentRecord properties."""

    def test__index_file__flattens_to_directory(self) -> None:
        record = _record("docs/core", "index.md")

        assert record.is_index
        assert record.flattened_path == "docs/core"

    def test__page__flattened_path_drops_extension(self) -> None:
        assert _record("docs/core", "accounts.mdx").flattened_path == "docs/core/accounts"

    def test__course_metadata__slug_is_directory(self) -> None:
        record = _record("content/courses/intro-to-solana", "metadata.yml")

        assert record.slug == "intro-to-solana"
        assert record.group is Group.COURSES

    def test__lesson__course_slug(self) -> None:
        record = _record("i18n/de/content/courses/intro/content", "setup.md", locale="de")

        assert record.group is Group.LESSONS
        assert record.course_slug == "intro"

    def test__non_lesson__no_course_slug(self) -> None:
        assert _record("docs", "intro.md").course_slug is None

    def test__to_dict__camel_case_keys(self) -> None:
        record = _record(
            "docs",
            "intro.md",
            title="Introduction",
            sidebar_label="Intro",
            sidebar_sort_order=1,
            alt_routes=("/docs/start",),
        )

        result = record.to_dict()

        assert result["title"] == "Introduction"
        assert result["sidebarLabel"] == "Intro"
        assert result["sidebarSortOrder"] == 1
        assert result["altRoutes"] == ["/docs/start"]
        assert result["sourceFilePath"] == "docs/intro.md"

    def test__to_dict__strips_locale_from_source_paths(self) -> None:
        record = _record("i18n/de/docs", "intro.md", locale="de")

        result = record.to_dict()

        assert result["sourceFilePath"] == "docs/intro.md"
        assert result["sourceFileDir"] == "docs"
        assert result["locale"] == "de"

    def test__to_dict__without_body(self) -> None:
        result = _record("docs", "intro.md").to_dict(include_body=False)

        assert "body" not in result
        assert "sourceFilePath" not in result

    def test__to_dict__keeps_extra_metadata(self) -> None:
        record = _record("docs", "intro.md", extra={"tags": ["core"]})

        assert record.to_dict()["tags"] == ["core"]


class TestRecordSnapshot:
    """Tests for RecordSnapshot lookups."""

    def test__for_group__filters_by_group_and_locale(self) -> None:
        snapshot = RecordSnapshot(
            [
                _record("docs", "intro.md"),
                _record("i18n/de/docs", "intro.md", locale="de"),
                _record("content/guides", "hello.md"),
            ],
        )

        records = snapshot.for_group(Group.DOCS, "de")

        assert [r.source_file_path for r in records] == ["i18n/de/docs/intro.md"]

    def test__missing_locale__falls_back_for_whole_group(self) -> None:
        """Serve the default locale when the group has no translation at all."""
        snapshot = RecordSnapshot([_record("content/guides", "hello.md")])

        records = snapshot.for_group(Group.GUIDES, "de")

        assert [r.locale for r in records] == ["en"]
        assert snapshot.effective_locale(Group.GUIDES, "de") == "en"

    def test__partial_translation__no_mixing(self) -> None:
        """Return only translated records once a group has any."""
        snapshot = RecordSnapshot(
            [
                _record("docs", "intro.md"),
                _record("docs", "other.md"),
                _record("i18n/de/docs", "intro.md", locale="de"),
            ],
        )

        records = snapshot.for_group(Group.DOCS, "de")

        assert len(records) == 1
        assert records[0].locale == "de"

    def test__rpc_group__includes_docs_index(self) -> None:
        """Add the docs root page to RPC listings with featured priority 0."""
        snapshot = RecordSnapshot(
            [
                _record("docs", "index.md", title="Docs"),
                _record("docs/rpc", "index.md", title="RPC"),
            ],
        )

        records = snapshot.for_group(Group.RPC)

        assert [r.title for r in records] == ["RPC", "Docs"]
        assert records[1].featured_priority == 0

    def test__locales__default_first(self) -> None:
        snapshot = RecordSnapshot(
            [
                _record("i18n/fr/docs", "intro.md", locale="fr"),
                _record("docs", "intro.md"),
                _record("i18n/de/docs", "intro.md", locale="de"),
            ],
        )

        assert snapshot.locales() == ["en", "de", "fr"]

    def test__find_course__by_slug(self, snapshot: RecordSnapshot) -> None:
        course = snapshot.find_course("intro-to-solana")

        assert course is not None
        assert course.lessons == ("intro", "setup", "advanced")

    def test__find_course__unknown_slug(self, snapshot: RecordSnapshot) -> None:
        assert snapshot.find_course("missing") is None

    def test__find_author__by_slug(self, snapshot: RecordSnapshot) -> None:
        author = snapshot.find_author("jdoe")

        assert author is not None
        assert author.title == "Jane Doe"


class TestPaginateRecords:
    """Tests for paginate_records()."""

    def test__first_page__slices_and_reports(self) -> None:
        records = [{"title": str(i)} for i in range(25)]

        page, pagination = paginate_records(records, page=1, page_size=10)

        assert len(page) == 10
        assert pagination == {
            "page": 1,
            "pageSize": 10,
            "totalPages": 3,
            "totalRecords": 25,
            "hasNextPage": True,
            "hasPreviousPage": False,
        }

    def test__last_page__partial(self) -> None:
        records = [{"title": str(i)} for i in range(25)]

        page, pagination = paginate_records(records, page=3, page_size=10)

        assert len(page) == 5
        assert not pagination["hasNextPage"]
        assert pagination["hasPreviousPage"]

    def test__page_past_end__empty(self) -> None:
        page, pagination = paginate_records([{"title": "a"}], page=5, page_size=10)

        assert page == []
        assert pagination["totalPages"] == 1

    def test__sort_field__descending(self) -> None:
        records = [{"title": "b"}, {"title": "c"}, {"title": "a"}]

        page, _ = paginate_records(records, sort_field="title", sort_direction="desc")

        assert [r["title"] for r in page] == ["c", "b", "a"]

    def test__sort_field__missing_values_last(self) -> None:
        records = [{"title": "b", "order": 2}, {"title": "x"}, {"title": "a", "order": 1}]

        page, _ = paginate_records(records, sort_field="order")

        assert [r["title"] for r in page] == ["a", "b", "x"]

    def test__mixed_value_types__numbers_before_strings(self) -> None:
        """Sort extra fields holding both numbers and strings without failing."""
        records = [{"title": "a", "level": "beginner"}, {"title": "b", "level": 2}, {"title": "c", "level": 1}]

        page, _ = paginate_records(records, sort_field="level")

        assert [r["title"] for r in page] == ["c", "b", "a"]

    def test__unknown_sort_field__keeps_order(self) -> None:
        records = [{"title": "b"}, {"title": "a"}]

        page, _ = paginate_records(records, sort_field="missing")

        assert [r["title"] for r in page] == ["b", "a"]

    @pytest.mark.parametrize(("page", "page_size"), [(0, 10), (1, 0), (-1, 5)])
    def test__non_positive_values__raise(self, page: int, page_size: int) -> None:
        with pytest.raises(ValueError, match="positive"):
            paginate_records([], page=page, page_size=page_size)
