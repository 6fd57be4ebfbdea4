import pytest

from skillforge.errors import SchemaViolationError
from skillforge.skills.models import ResourceType, SkillFile
from skillforge.skills.schema import is_well_formed, parse_package, validate_package


def test_parse_valid_payload(invoice_payload) -> None:
    package = parse_package(invoice_payload)
    assert package.slug == "invoice-sorter"
    assert package.file_count == 2


def test_resources_are_optional(invoice_payload) -> None:
    del invoice_payload["resources"]
    assert parse_package(invoice_payload).resources == ()


def test_missing_frontmatter_is_rejected(invoice_payload) -> None:
    del invoice_payload["frontmatter"]
    with pytest.raises(SchemaViolationError, match="frontmatter"):
        parse_package(invoice_payload)


@pytest.mark.parametrize("field", ["name", "description"])
def test_blank_frontmatter_field_is_rejected(invoice_payload, field: str) -> None:
    invoice_payload["frontmatter"][field] = "   "
    with pytest.raises(SchemaViolationError):
        parse_package(invoice_payload)


def test_unknown_resource_type_is_rejected(invoice_payload) -> None:
    invoice_payload["resources"][0]["type"] = "binary"
    with pytest.raises(SchemaViolationError, match="resources.0.type"):
        parse_package(invoice_payload)


def test_null_language_is_accepted(invoice_payload) -> None:
    invoice_payload["resources"][0]["language"] = None
    assert parse_package(invoice_payload).resources[0].language is None


def test_duplicate_filenames_in_one_bucket_are_rejected(invoice_payload) -> None:
    invoice_payload["resources"].append(
        {"filename": "sort.py", "type": "script", "content": "print('y')"}
    )
    with pytest.raises(SchemaViolationError, match="scripts/sort.py"):
        parse_package(invoice_payload)


def test_same_filename_in_different_buckets_is_allowed(invoice_payload) -> None:
    invoice_payload["resources"].append(
        {"filename": "sort.py", "type": "reference", "content": "notes"}
    )
    assert parse_package(invoice_payload).file_count == 3


@pytest.mark.parametrize("filename", ["/etc/passwd", "../escape.py", "a/../b.py", "./x"])
def test_unsafe_filenames_are_rejected(invoice_payload, filename: str) -> None:
    invoice_payload["resources"][0]["filename"] = filename
    with pytest.raises(SchemaViolationError, match="unsafe filename"):
        parse_package(invoice_payload)


@pytest.mark.parametrize("slug", ["a/b", "..", "."])
def test_unsafe_slug_is_rejected(invoice_payload, slug: str) -> None:
    invoice_payload["slug"] = slug
    with pytest.raises(SchemaViolationError, match="slug"):
        parse_package(invoice_payload)


def test_validate_package_checks_dataclass(invoice_package) -> None:
    validate_package(invoice_package)
    duplicated = invoice_package.resources + (
        SkillFile("sort.py", "again", ResourceType.SCRIPT),
    )
    broken = type(invoice_package)(
        slug=invoice_package.slug,
        frontmatter=invoice_package.frontmatter,
        body=invoice_package.body,
        resources=duplicated,
    )

    assert is_well_formed(invoice_package)
    assert not is_well_formed(broken)


def test_schema_error_is_an_analysis_failure() -> None:
    with pytest.raises(SchemaViolationError) as exc_info:
        parse_package({"slug": "x"})
    assert exc_info.value.kind == "schema_violation"
