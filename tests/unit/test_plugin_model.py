"""
Tests for the Plugin model.

This test suite covers:
1. Source parsing (shorthand, URLs, invalid input)
2. Name derivation
3. Configuration descriptors (tables, options, local paths)
4. Forge links (compare and commit URLs)
"""

from pathlib import Path

import pytest

from muxi.plugin.errors import SourceParseError
from muxi.plugin.model import Plugin


class TestPluginParse:
    """Test parsing plugin source strings."""

    def test_parse_short_form(self):
        """Should expand owner/repo to a GitHub URL."""
        plugin = Plugin.parse("tmux-plugins/tmux-continuum")
        assert plugin.url == "https://github.com/tmux-plugins/tmux-continuum"
        assert plugin.path is None

    def test_parse_full_url(self):
        """Should keep a full URL unchanged."""
        plugin = Plugin.parse("https://github.com/tmux-plugins/tmux-continuum")
        assert plugin.url == "https://github.com/tmux-plugins/tmux-continuum"

    def test_parse_custom_git_url(self):
        """Should accept URLs on any host."""
        plugin = Plugin.parse("https://gitlab.com/user/repo")
        assert plugin.url == "https://gitlab.com/user/repo"

    def test_parse_file_url(self):
        """Should accept file:// URLs."""
        plugin = Plugin.parse("file:///srv/git/tmux-yank")
        assert plugin.url == "file:///srv/git/tmux-yank"
        assert plugin.name == "tmux-yank"

    def test_parse_without_slash_fails(self):
        """Should reject a bare word."""
        with pytest.raises(SourceParseError, match="relative URL without a base"):
            Plugin.parse("tmux-yank")

    def test_parse_empty_fails(self):
        """Should reject an empty source."""
        with pytest.raises(SourceParseError, match="empty"):
            Plugin.parse("")

    def test_parse_missing_scheme_fails(self):
        """Should reject a URL without a scheme."""
        with pytest.raises(SourceParseError, match="scheme"):
            Plugin.parse("://github.com/user/repo")

    def test_parse_empty_host_fails(self):
        """Should name the empty host rather than the scheme."""
        with pytest.raises(SourceParseError, match="empty host"):
            Plugin.parse("https://")

    def test_parse_unusable_name_fails(self):
        """Should reject sources whose name would escape the plugins root."""
        for source in (
            "owner/..",
            "owner/.",
            "owner/.git",
            "https://example.com/",
            "https://example.com/a/..",
            "owner/a\\b",
        ):
            with pytest.raises(SourceParseError, match="cannot derive a plugin name"):
                Plugin.parse(source)


class TestPluginName:
    """Test name derivation."""

    def test_name_from_shorthand(self):
        """Should use the repository name."""
        assert Plugin.parse("tmux-plugins/tmux-continuum").name == "tmux-continuum"

    def test_name_strips_git_suffix(self):
        """Should drop a trailing .git."""
        assert Plugin.parse("https://github.com/a/b.git").name == "b"
        assert Plugin.parse("https://github.com/a/b").name == "b"

    def test_name_ignores_trailing_slash(self):
        """Should ignore a trailing slash."""
        assert Plugin.parse("https://github.com/a/b/").name == "b"

    def test_local_name(self):
        """Should use the final path component for local plugins."""
        plugin = Plugin.local("~/dev/my-plugin")
        assert plugin.url is None
        assert plugin.name == "my-plugin"
        assert plugin.path == Path.home() / "dev" / "my-plugin"

    def test_install_path(self, tmp_path):
        """Remote plugins live under the plugins root, local ones stay put."""
        remote = Plugin.parse("tmux-plugins/tmux-continuum")
        assert remote.install_path(tmp_path) == tmp_path / "tmux-continuum"

        local = Plugin.local(tmp_path / "mine")
        assert local.install_path(Path("/elsewhere")) == tmp_path / "mine"

    def test_install_path_stays_under_root(self, tmp_path):
        """Remote install paths are always direct children of the root."""
        for source in ("owner/repo", "https://gitlab.com/a/b.git/", "owner/..repo"):
            plugin = Plugin.parse(source)
            assert plugin.install_path(tmp_path).parent == tmp_path


class TestPluginDescriptor:
    """Test building plugins from configuration entries."""

    def test_descriptor_string(self):
        """Should parse a bare string."""
        plugin = Plugin.from_descriptor("tmux-plugins/tmux-yank")
        assert plugin.name == "tmux-yank"
        assert plugin.options == {}

    def test_descriptor_with_options(self):
        """Should parse url and opts."""
        plugin = Plugin.from_descriptor(
            {
                "url": "tmux-plugins/tmux-yank",
                "opts": {
                    "copy_mode_put": "Space",
                    "yank_selection_mouse": "clipboard",
                },
            }
        )

        assert plugin.name == "tmux-yank"
        assert plugin.url == "https://github.com/tmux-plugins/tmux-yank"
        assert plugin.options == {
            "copy_mode_put": "Space",
            "yank_selection_mouse": "clipboard",
        }

    def test_descriptor_local_path(self):
        """Should build a local plugin from path."""
        plugin = Plugin.from_descriptor({"path": "~/dev/my-plugin", "opts": {"a": "b"}})
        assert plugin.is_local
        assert plugin.path == Path.home() / "dev" / "my-plugin"
        assert plugin.options == {"a": "b"}

    def test_descriptor_ignores_unknown_keys(self):
        """Should ignore keys it does not know."""
        plugin = Plugin.from_descriptor({"url": "a/b", "branch": "dev"})
        assert plugin.name == "b"

    def test_descriptor_requires_source(self):
        """Should reject a table without url or path."""
        with pytest.raises(SourceParseError, match="either `url` or `path`"):
            Plugin.from_descriptor({"opts": {}})

    def test_descriptor_rejects_url_and_path(self):
        """Should reject a table with both url and path."""
        with pytest.raises(SourceParseError, match="both"):
            Plugin.from_descriptor({"url": "a/b", "path": "~/b"})

    def test_descriptor_rejects_non_string_option(self):
        """Should reject option values that are not strings."""
        with pytest.raises(SourceParseError, match="must map a string"):
            Plugin.from_descriptor({"url": "a/b", "opts": {"retries": 3}})

    def test_descriptor_rejects_other_types(self):
        """Should reject entries that are neither strings nor tables."""
        with pytest.raises(SourceParseError, match="got int"):
            Plugin.from_descriptor(42)


class TestForgeLinks:
    """Test compare and commit URLs."""

    FROM = "a" * 40
    TO = "b" * 40

    def test_compare_url_github(self):
        """GitHub hosts use /compare/."""
        plugin = Plugin.parse("tmux-plugins/tmux-continuum")
        assert plugin.compare_url(self.FROM, self.TO) == (
            f"https://github.com/tmux-plugins/tmux-continuum/compare/{self.FROM}...{self.TO}"
        )

    def test_compare_url_gitlab(self):
        """GitLab hosts use /-/compare/."""
        plugin = Plugin.parse("https://gitlab.com/user/repo")
        assert plugin.compare_url(self.FROM, self.TO) == (
            f"https://gitlab.com/user/repo/-/compare/{self.FROM}...{self.TO}"
        )

    def test_compare_url_strips_git_suffix(self):
        """Should drop .git from the repository URL."""
        plugin = Plugin.parse("https://github.com/user/repo.git")
        assert plugin.compare_url("1", "2") == "https://github.com/user/repo/compare/1...2"

    def test_compare_url_unknown_host(self):
        """Unknown hosts have no compare URL."""
        plugin = Plugin.parse("https://example.com/user/repo")
        assert plugin.compare_url(self.FROM, self.TO) is None

    def test_compare_url_local(self):
        """Local plugins have no compare URL."""
        assert Plugin.local("/tmp/plugin").compare_url(self.FROM, self.TO) is None

    def test_commit_url(self):
        """Commit URLs follow the host's layout."""
        github = Plugin.parse("user/repo")
        gitlab = Plugin.parse("https://gitlab.com/user/repo.git")
        other = Plugin.parse("https://example.com/user/repo")

        assert github.commit_url(self.TO) == f"https://github.com/user/repo/commit/{self.TO}"
        assert gitlab.commit_url(self.TO) == f"https://gitlab.com/user/repo/-/commit/{self.TO}"
        assert other.commit_url(self.TO) is None

    def test_str(self):
        """Should render the source."""
        assert str(Plugin.parse("user/repo")) == "https://github.com/user/repo"
        assert str(Plugin.local("/opt/plugin")) == "/opt/plugin"
