from pathlib import Path
from textwrap import dedent
from unittest.mock import patch

import pytest

from aclprop.acl.acl_file import AclFile
from aclprop.acl.entry import AclEntry, EntryTag
from aclprop.errors import InputError, NotFoundError


class TestAclFile:
    def test_from_string_simple(self, lookup, alice, staff) -> None:
        content = dedent("""
            u:alice:rwx
            g:staff:r-x
            m::rwx
        """)

        acl_file = AclFile.from_string(content, lookup=lookup)
        assert acl_file.entries == (
            AclEntry(EntryTag.user, "rwx", alice),
            AclEntry(EntryTag.group, "r-x", staff),
            AclEntry(EntryTag.mask, "rwx"),
        )

    def test_from_string_getfacl_output(self, lookup, alice) -> None:
        content = dedent("""
            # file: srv/data
            # owner: root
            # group: root
            user::rwx
            user:alice:rwx\t\t#effective:r-x
            group::r-x
            mask::r-x
            other::---
            default:user:alice:rwx
        """)

        acl_file = AclFile.from_string(content, lookup=lookup)
        assert acl_file.entries == (
            AclEntry(EntryTag.user_obj, "rwx"),
            AclEntry(EntryTag.user, "rwx", alice),
            AclEntry(EntryTag.group_obj, "r-x"),
            AclEntry(EntryTag.mask, "r-x"),
            AclEntry(EntryTag.other, "---"),
            AclEntry(EntryTag.user, "rwx", alice, default=True),
        )

    def test_from_string_comma_separated(self, lookup, alice, staff) -> None:
        acl_file = AclFile.from_string("u:alice:rwX,g:staff:rX\n", lookup=lookup)
        assert acl_file.entries == (AclEntry(EntryTag.user, "rwX", alice), AclEntry(EntryTag.group, "rX", staff))

    def test_from_string_empty_lines_ignored(self, lookup) -> None:
        content = dedent("""
            u:alice:rwx

            g:staff:r-x
        """)

        assert len(AclFile.from_string(content, lookup=lookup).entries) == 2

    def test_from_string_empty_content(self, lookup) -> None:
        assert AclFile.from_string("", lookup=lookup).entries == ()

    def test_from_string_reports_line_number(self, lookup) -> None:
        content = dedent("""\
            u:alice:rwx
            bogus
        """)

        with pytest.raises(InputError, match=r"Invalid ACL entry: bogus \(line 2\)"):
            AclFile.from_string(content, lookup=lookup)

    def test_from_string_unknown_principal(self, lookup) -> None:
        with pytest.raises(NotFoundError, match="The group 'nobody-here' doesn't exist"):
            AclFile.from_string("g:nobody-here:rwx", lookup=lookup)

    def test_from_file(self, tmp_path: Path, lookup, alice) -> None:
        acl_path = tmp_path / "acl.txt"
        acl_path.write_text("u:alice:rwx\n")

        acl_file = AclFile.from_file(acl_path, lookup=lookup)
        assert acl_file.entries == (AclEntry(EntryTag.user, "rwx", alice),)

    def test_from_file_missing(self, tmp_path: Path, lookup) -> None:
        with pytest.raises(NotFoundError, match="The ACL file '.*missing.txt' wasn't found!"):
            AclFile.from_file(tmp_path / "missing.txt", lookup=lookup)

    def test_from_file_directory(self, tmp_path: Path, lookup) -> None:
        with pytest.raises(NotFoundError, match="wasn't found"):
            AclFile.from_file(tmp_path, lookup=lookup)

    def test_from_file_unreadable(self, tmp_path: Path, lookup) -> None:
        acl_path = tmp_path / "acl.txt"
        acl_path.write_text("u:alice:rwx\n")

        with patch("builtins.open", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(InputError, match="The ACL file '.*acl.txt' couldn't be read: Permission denied"):
                AclFile.from_file(acl_path, lookup=lookup)

    def test_from_file_names_file_in_errors(self, tmp_path: Path, lookup) -> None:
        acl_path = tmp_path / "acl.txt"
        acl_path.write_text("u:alice:rwq\n")

        with pytest.raises(InputError, match="acl.txt"):
            AclFile.from_file(acl_path, lookup=lookup)

    def test_to_string(self, lookup) -> None:
        content = "u:alice:rwx\nd:g:staff:rX\nm::rwx\no::---\n"
        assert AclFile.from_string(content, lookup=lookup).to_string() == content

    def test_to_string_normalizes_long_form(self, lookup) -> None:
        acl_file = AclFile.from_string("user:alice:rwx, default:group:staff:r-x", lookup=lookup)
        assert acl_file.to_string() == "u:alice:rwx\nd:g:staff:r-x\n"
