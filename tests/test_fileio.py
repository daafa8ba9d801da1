from primegrid.fileio import read_ranges, write_primes, write_ranges


def test_missing_file_is_created_with_default(tmp_path):
    path = tmp_path / "ranges.txt"
    assert read_ranges(path) == [(1, 1)]
    assert path.exists()


def test_empty_file_gives_default(tmp_path):
    path = tmp_path / "ranges.txt"
    path.write_text("")
    assert read_ranges(path) == [(1, 1)]


def test_ranges_round_trip(tmp_path):
    path = tmp_path / "ranges.txt"
    ranges = [(1, 100), (201, 300), (5000, 2**64 - 1)]
    write_ranges(path, ranges)
    assert read_ranges(path) == ranges


def test_write_ranges_truncates(tmp_path):
    path = tmp_path / "ranges.txt"
    write_ranges(path, [(1, 2), (3, 4)])
    write_ranges(path, [(7, 8)])
    assert path.read_text() == "7 8\n"


def test_reading_stops_at_bad_token(tmp_path):
    path = tmp_path / "ranges.txt"
    path.write_text("1 10\n20 30\nfoo 50\n60 70\n")
    assert read_ranges(path) == [(1, 10), (20, 30)]


def test_incomplete_pair_ignored(tmp_path):
    path = tmp_path / "ranges.txt"
    path.write_text("1 10\n20")
    assert read_ranges(path) == [(1, 10)]


def test_write_primes_appends(tmp_path):
    path = tmp_path / "primes.txt"
    write_primes(path, [2, 3])
    write_primes(path, [5])
    assert path.read_text() == "2 \n3 \n5 \n"