from app.config.tricks_config import SAMPLE_MAGIC_TRICKS
from app.scripts.seed_sample_tricks import main, seed_sample_tricks
from tests.conftest import TEST_USER_ID

import pytest


def test_seeds_each_sample_once(fake_supabase):
    assert seed_sample_tricks(fake_supabase, TEST_USER_ID) == len(SAMPLE_MAGIC_TRICKS)
    assert seed_sample_tricks(fake_supabase, TEST_USER_ID) == 0

    rows = fake_supabase.tables["magic_tricks"]
    assert len(rows) == len(SAMPLE_MAGIC_TRICKS)
    assert {row["user_id"] for row in rows} == {TEST_USER_ID}


def test_insert_error_skips_that_trick(fake_supabase):
    fake_supabase.fail("magic_tricks", "insert", RuntimeError("rls"))
    assert seed_sample_tricks(fake_supabase, TEST_USER_ID) == len(SAMPLE_MAGIC_TRICKS) - 1


def test_requires_user_id():
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2
