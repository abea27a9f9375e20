from utils.settings import load_settings


def test_defaults_without_file(tmp_path):
    s = load_settings(str(tmp_path / "missing.ini"))
    assert s.skill_points_per_level == 4
    assert s.max_rounds == 100


def test_reads_sections(tmp_path):
    ini = tmp_path / "settings.ini"
    ini.write_text(
        "[Storage]\ndata_dir = somewhere\n\n"
        "[fight]\nmax_rounds = 12\ndefend_stamina_regen = 20%\n\n"
        "[shop]\nsell_ratio = 0.25\n\n"
        "[cooldowns]\nFight = 3\nraid = soon\n",
        encoding="utf-8",
    )
    s = load_settings(str(ini))
    assert s.source == str(ini)
    assert s.data_dir == "somewhere"
    assert s.max_rounds == 12
    assert s.defend_stamina_regen == 20.0
    assert s.sell_ratio == 0.25
    assert s.cooldowns == {"fight": 3}
