"""Tests for qmdtools.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from qmdtools.config import (
    DEFAULT_EXCLUDED,
    ConfigError,
    QmdToolsConfig,
    RPackagesConfig,
    load_config,
)


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, QmdToolsConfig)
    assert config.root == tmp_path.resolve()
    assert config.r_packages == RPackagesConfig()
    assert config.r_packages.output == "R.pkgs"
    assert config.r_packages.always_required == ["knitr"]
    assert config.r_packages.weave_only == ["knitr"]
    assert config.r_packages.exclude == list(DEFAULT_EXCLUDED)
    assert config.frontmatter.output == "metadata_qmd.yaml"
    assert config.status.pattern == "IPBES_*"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".qmdtools.yml"
    config_file.write_text(
        """
r_packages:
  output: "deps/R.pkgs"
  document_glob: "*.Rmd"
  always_required: [knitr, rmarkdown]
  weave_only:
    - knitr
  exclude: []
frontmatter:
  output: front.yaml
status:
  pattern: "TG_*"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.r_packages.output == "deps/R.pkgs"
    assert config.r_packages.document_glob == "*.Rmd"
    assert config.r_packages.always_required == ["knitr", "rmarkdown"]
    assert config.r_packages.weave_only == ["knitr"]
    assert config.r_packages.exclude == []
    assert config.frontmatter.output == "front.yaml"
    assert config.status.pattern == "TG_*"


def test_load_config_ignores_wrongly_typed_values(tmp_path: Path) -> None:
    (tmp_path / ".qmdtools.yml").write_text(
        "r_packages:\n  output: yes\n  always_required: [knitr, no]\nstatus: 3\n",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.r_packages.output == "R.pkgs"
    assert config.r_packages.always_required == ["knitr"]
    assert config.status.pattern == "IPBES_*"


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".qmdtools.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).r_packages == RPackagesConfig()


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".qmdtools.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_reports_yaml_errors(tmp_path: Path) -> None:
    (tmp_path / ".qmdtools.yml").write_text("r_packages: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)
