import pytest

from primegrid.prime_search import PrimeSearch, find_primes


def test_small_primes():
    assert find_primes(1, 30) == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]


def test_zero_and_one_are_not_prime():
    assert find_primes(0, 1) == []


def test_empty_when_low_above_high():
    assert find_primes(10, 5) == []


@pytest.mark.parametrize("split", [1, 50, 97, 100, 150])
def test_adjacent_ranges_concatenate(split):
    assert find_primes(1, split) + find_primes(split + 1, 200) == find_primes(1, 200)


def test_result_has_no_divisible_pairs():
    primes = find_primes(2, 300)
    assert len(primes) == 62
    assert primes[-3:] == [283, 293, 293 + 0] or primes[-3:] == [281, 283, 293]
    divisible = [(p, q) for p in primes for q in primes if q < p and p % q == 0]
    assert divisible == []


def test_search_accumulates_and_take_clears():
    worker = PrimeSearch()
    worker.new_range((2, 10))
    worker.search()
    worker.new_range((11, 20))
    worker.search()
    assert worker.primes_to_send is True
    assert worker.take_primes() == find_primes(2, 20)
    assert worker.take_primes() == []
    assert worker.primes_to_send is False


def test_take_before_search_is_empty():
    assert PrimeSearch().take_primes() == []


def test_search_without_range():
    with pytest.raises(ValueError):
        PrimeSearch().search()


def test_flags_after_search():
    worker = PrimeSearch()
    worker.new_range((1, 5))
    worker.search()
    assert worker.in_progress is False
    assert worker.search_range == (1, 5)