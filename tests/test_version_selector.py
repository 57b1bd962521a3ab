import pytest

from data_structures import Region
from errors import MemoryConfigurationError
from version_selector import (
    LEGACY_SELECTION,
    MODERN_SELECTION,
    parse_version,
    select_regions,
)


@pytest.mark.parametrize(
    'text, expected',
    [
        ('1.7.0', (1, 7, 0, '')),
        ('1.7.0_u40', (1, 7, 0, 'u40')),
        ('1.8', (1, 8, 0, '')),
        ('11.0.2', (11, 0, 2, '')),
        ('17', (17, 0, 0, '')),
        ('21.0.1+12', (21, 0, 1, '12')),
    ],
)
def test_parse_version(text, expected):
  assert parse_version(text) == expected


def test_parse_version_accepts_tuples():
  assert parse_version((1, 8)) == (1, 8, 0, '')


@pytest.mark.parametrize('text', ['', 'abc', '1..8', 'v1.8.0'])
def test_parse_version_rejects_malformed(text):
  with pytest.raises(MemoryConfigurationError):
    parse_version(text)


@pytest.mark.parametrize('version', ['1.6.0_45', '1.7.0', '1.7.9', '1.7.0_u80'])
def test_versions_before_8_use_permgen(version):
  selection = select_regions(version)
  assert selection is LEGACY_SELECTION
  assert selection.regions == (
      Region.HEAP, Region.STACK, Region.NATIVE, Region.PERMGEN)
  assert selection.flag_templates[Region.PERMGEN] == '-XX:MaxPermSize={size}'


@pytest.mark.parametrize('version', ['1.8.0', '1.8.0_u20', '11.0.2', '17', (1, 8, 0)])
def test_versions_from_8_use_metaspace(version):
  selection = select_regions(version)
  assert selection is MODERN_SELECTION
  assert selection.regions == (
      Region.HEAP, Region.STACK, Region.NATIVE, Region.METASPACE)
  assert (selection.flag_templates[Region.METASPACE]
          == '-XX:MaxMetaspaceSize={size}')


def test_shared_regions_are_identical_across_boundary():
  legacy = select_regions('1.7.0')
  modern = select_regions('1.8.0')
  assert legacy.regions[:3] == modern.regions[:3]
  for region in (Region.HEAP, Region.STACK):
    assert legacy.flag_templates[region] == modern.flag_templates[region]
  assert Region.NATIVE not in legacy.flag_templates
  assert Region.NATIVE not in modern.flag_templates


@pytest.mark.parametrize('version', [['1', '8', '0'], None, 1.8])
def test_non_string_versions_are_rejected(version):
  with pytest.raises(MemoryConfigurationError):
    select_regions(version)
