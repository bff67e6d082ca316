"""
Unit tests for quiz authoring rules.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from classhub.modules.quizzes import service
from classhub.modules.quizzes.models import QuestionType, QuizQuestion
from classhub.modules.quizzes.schemas import (
    CreateOptionRequest,
    CreateQuestionRequest,
    UpdateOptionRequest,
    UpdateQuestionRequest,
)

SERVICE = "classhub.modules.quizzes.service"


def _question(question_type=QuestionType.SINGLE_CHOICE):
    return QuizQuestion(id=11, quiz_id=1, content="2 + 2 = ?", question_type=question_type)


class TestQuestionType:
    def test_only_multiple_choice_allows_several_correct(self):
        assert QuestionType.MULTIPLE_CHOICE.allows_multiple_correct is True
        assert QuestionType.SINGLE_CHOICE.allows_multiple_correct is False
        assert QuestionType.TRUE_FALSE.allows_multiple_correct is False


class TestCreateQuestion:
    @pytest.mark.asyncio
    async def test_group_from_another_quiz(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_quiz = AsyncMock(return_value=MagicMock(id=1))
            mock_repo.get_group = AsyncMock(return_value=None)
            mock_repo.create_question = AsyncMock()

            with pytest.raises(service.InvalidQuestionGroupError) as exc_info:
                await service.create_question(
                    mock_db, 1, CreateQuestionRequest(content="Q", group_id=99)
                )

            assert exc_info.value.error_code == "INVALID_QUESTION_GROUP"
            mock_repo.get_group.assert_awaited_once_with(mock_db, 1, 99)
            mock_repo.create_question.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deleted_quiz(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_quiz = AsyncMock(return_value=None)

            with pytest.raises(service.QuizNotFoundError):
                await service.create_question(mock_db, 1, CreateQuestionRequest(content="Q"))


class TestCorrectOptions:
    @pytest.mark.asyncio
    async def test_second_correct_option_on_single_choice(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_quiz = AsyncMock(return_value=MagicMock(id=1))
            mock_repo.get_question = AsyncMock(return_value=_question())
            mock_repo.count_correct_options = AsyncMock(return_value=1)
            mock_repo.create_option = AsyncMock()

            with pytest.raises(service.MultipleCorrectOptionsError) as exc_info:
                await service.create_option(
                    mock_db, 1, 11, CreateOptionRequest(content="5", is_correct=True)
                )

            assert exc_info.value.status_code == 422
            mock_repo.create_option.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_multiple_choice_skips_the_check(self, mock_db):
        option = MagicMock(id=3)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_quiz = AsyncMock(return_value=MagicMock(id=1))
            mock_repo.get_question = AsyncMock(
                return_value=_question(QuestionType.MULTIPLE_CHOICE)
            )
            mock_repo.count_correct_options = AsyncMock()
            mock_repo.create_option = AsyncMock(return_value=option)

            result = await service.create_option(
                mock_db, 1, 11, CreateOptionRequest(content="4", is_correct=True)
            )

            assert result is option
            mock_repo.count_correct_options.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_marking_same_option_correct_again_is_allowed(self, mock_db):
        option = MagicMock(id=3)
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_quiz = AsyncMock(return_value=MagicMock(id=1))
            mock_repo.get_question = AsyncMock(return_value=_question())
            mock_repo.get_option = AsyncMock(return_value=option)
            mock_repo.count_correct_options = AsyncMock(return_value=0)
            mock_repo.update_option = AsyncMock(return_value=option)

            await service.update_option(mock_db, 1, 11, 3, UpdateOptionRequest(is_correct=True))

            mock_repo.count_correct_options.assert_awaited_once_with(
                mock_db, 11, exclude_option_id=3
            )
            mock_repo.update_option.assert_awaited_once_with(mock_db, option, is_correct=True)

    @pytest.mark.asyncio
    async def test_switch_to_single_choice_with_two_correct(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_quiz = AsyncMock(return_value=MagicMock(id=1))
            mock_repo.get_question = AsyncMock(
                return_value=_question(QuestionType.MULTIPLE_CHOICE)
            )
            mock_repo.count_correct_options = AsyncMock(return_value=2)
            mock_repo.update_question = AsyncMock()

            with pytest.raises(service.MultipleCorrectOptionsError):
                await service.update_question(
                    mock_db,
                    1,
                    11,
                    UpdateQuestionRequest(question_type=QuestionType.TRUE_FALSE),
                )

            mock_repo.update_question.assert_not_awaited()


class TestDeleteQuestionGroup:
    @pytest.mark.asyncio
    async def test_unknown_group(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_quiz = AsyncMock(return_value=MagicMock(id=1))
            mock_repo.get_group = AsyncMock(return_value=None)
            mock_repo.delete_group = AsyncMock()

            with pytest.raises(service.QuestionGroupNotFoundError):
                await service.delete_question_group(mock_db, 1, 5)

            mock_repo.delete_group.assert_not_awaited()
