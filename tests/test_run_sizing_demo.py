from run_sizing_demo import run


def test_prints_java_opts(capsys):
  assert run(['--memory_limit', '1024m', '--java_version', '1.8.0']) == 0
  out = capsys.readouterr().out
  assert '-Xmx768m -Xss52428k -XX:MaxMetaspaceSize=104857k' in out


def test_reads_memory_limit_from_environment(monkeypatch, capsys):
  monkeypatch.setenv('MEMORY_LIMIT', '1g')
  assert run(['--java_version', '1.7.0', '--weights', '{"native": 0}',
              '--sizes', '{"permgen": "128m", "stack": "1m"}']) == 0
  assert '-Xmx895m -Xss1m -XX:MaxPermSize=128m' in capsys.readouterr().out


def test_cross_check_passes_for_valid_configuration(capsys):
  assert run(['--memory_limit', '2g', '--max_sizes', '{"heap": "1g"}',
              '--cross_check']) == 0
  assert 'Warning' not in capsys.readouterr().out


def test_over_allocation_aborts(capsys):
  assert run(['--memory_limit', '512m', '--sizes', '{"heap": "600m"}']) == 1
  assert capsys.readouterr().out.startswith('Error:')


def test_unknown_region_aborts(capsys):
  assert run(['--memory_limit', '512m', '--java_version', '1.8.0',
              '--weights', '{"permgen": 0.1}']) == 1
  assert 'permgen' in capsys.readouterr().out


def test_invalid_json_aborts(capsys):
  assert run(['--memory_limit', '512m', '--weights', '[1, 2]']) == 1
  assert 'must be a JSON object' in capsys.readouterr().out


def test_missing_memory_limit_aborts(monkeypatch, capsys):
  monkeypatch.delenv('MEMORY_LIMIT', raising=False)
  assert run([]) == 1
  assert 'MEMORY_LIMIT is not set' in capsys.readouterr().out


def test_random_configuration_is_reproducible(capsys):
  args = ['--random_seed', '5', '--java_version', '1.7.0', '--cross_check']
  first = run(args)
  first_out = capsys.readouterr().out
  second = run(args)
  assert first == second
  assert first_out == capsys.readouterr().out
  if first == 0:
    assert '-XX:MaxPermSize=' in first_out
    assert 'Warning' not in first_out
  else:
    assert 'Error:' in first_out


def test_random_configuration_does_not_need_memory_limit(monkeypatch, capsys):
  monkeypatch.delenv('MEMORY_LIMIT', raising=False)
  run(['--random_seed', '0'])
  assert 'MEMORY_LIMIT is not set' not in capsys.readouterr().out
