from unittest.mock import call, MagicMock

import pytest

from road_network_fetcher import linear_backoff, RetryAttemptsExhausted, RetryPolicy


class TestRetryPolicy:
    def test_returns_first_success(self) -> None:
        # Arrange
        sleep_mock = MagicMock()
        operation = MagicMock(side_effect=[ConnectionError("down"), "result"])
        retry_policy = RetryPolicy(3, linear_backoff(1.0), sleep=sleep_mock)

        # Act
        result = retry_policy.call(operation)

        # Assert
        assert result == "result"
        assert operation.call_count == 2
        sleep_mock.assert_called_once_with(1.0)

    def test_exhausted_attempts(self) -> None:
        # Arrange
        sleep_mock = MagicMock()
        last_error = ConnectionError("still down")
        operation = MagicMock(
            side_effect=[ConnectionError("down"), TimeoutError("slow"), last_error]
        )
        retry_policy = RetryPolicy(3, linear_backoff(1.0), sleep=sleep_mock)

        # Act
        with pytest.raises(RetryAttemptsExhausted) as exc_info:
            retry_policy.call(operation, description="Download")

        # Assert
        assert exc_info.value.attempts == 3
        assert exc_info.value.last_error is last_error
        assert str(exc_info.value) == "Download failed 3 times: still down"
        assert sleep_mock.call_args_list == [call(1.0), call(2.0)]

    def test_unlisted_exception_is_not_retried(self) -> None:
        # Arrange
        sleep_mock = MagicMock()
        operation = MagicMock(side_effect=ValueError("bad data"))
        retry_policy = RetryPolicy(
            3, retry_on=(ConnectionError,), sleep=sleep_mock
        )

        # Act & Assert
        with pytest.raises(ValueError, match="bad data"):
            retry_policy.call(operation)

        operation.assert_called_once()
        sleep_mock.assert_not_called()

    def test_invalid_max_attempts(self) -> None:
        # Act & Assert
        with pytest.raises(ValueError):
            RetryPolicy(0)

    def test_single_attempt_is_not_retried(self) -> None:
        # Arrange
        sleep_mock = MagicMock()
        error = ConnectionError("down")
        operation = MagicMock(side_effect=error)
        retry_policy = RetryPolicy(1, sleep=sleep_mock)

        # Act
        with pytest.raises(RetryAttemptsExhausted) as exc_info:
            retry_policy.call(operation)

        # Assert
        assert exc_info.value.attempts == 1
        assert exc_info.value.last_error is error
        operation.assert_called_once()
        sleep_mock.assert_not_called()
