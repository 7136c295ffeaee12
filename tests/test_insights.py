import pytest

from weekly_survey.schemas.insights import StarDistributionInsightOut, WordCloudInsightOut
from weekly_survey.schemas.survey import InputConfig, StarConfig
from weekly_survey.services.errors import InvalidQuestionConfig, UnsupportedQuestionType
from weekly_survey.services.insights import (
    generate_question_insight,
    generate_star_distribution,
    generate_word_cloud,
    parse_question_config,
    tokenize,
)


class FakeAnswer:
    def __init__(self, value):
        self.value = value


# ---------- estrellas ----------

def test_star_distribution_example():
    result = generate_star_distribution([FakeAnswer(v) for v in ["5", "4", "5", "3", "5"]], 5)
    assert result["distribution"] == {0: 0, 1: 0, 2: 0, 3: 1, 4: 1, 5: 3}
    assert result["average"] == 4.4
    assert result["total_responses"] == 5


def test_star_distribution_skips_invalid_values():
    answers = [FakeAnswer(v) for v in ["2", "abc", "6", "-1", "", "4", None]]
    result = generate_star_distribution(answers, 5)
    assert result["distribution"] == {0: 0, 1: 0, 2: 1, 3: 0, 4: 1, 5: 0}
    assert result["total_responses"] == 2
    assert result["average"] == 3


def test_star_distribution_without_valid_answers_is_zero():
    result = generate_star_distribution([FakeAnswer("x"), FakeAnswer("11")], 10)
    assert result["average"] == 0
    assert result["total_responses"] == 0
    assert list(result["distribution"]) == list(range(11))
    assert set(result["distribution"].values()) == {0}


def test_star_distribution_rounds_to_two_decimals():
    result = generate_star_distribution(["1", "1", "2"], 5)
    assert result["average"] == 1.33


def test_star_distribution_accepts_zero():
    result = generate_star_distribution(["0", "0"], 3)
    assert result["distribution"][0] == 2
    assert result["average"] == 0
    assert result["total_responses"] == 2


# ---------- nube de palabras ----------

def test_tokenize_drops_short_tokens():
    tokens = tokenize("a b good 我 , course")
    assert "good" in tokens
    assert "course" in tokens
    assert all(len(t) > 1 for t in tokens)


def test_word_cloud_counts_across_answers_and_sorts():
    answers = [FakeAnswer("great teacher"), FakeAnswer("great pace"), FakeAnswer("great teacher !")]
    words = generate_word_cloud(answers)
    by_text = {w.text: w.weight for w in words}
    assert by_text["great"] == 3
    assert by_text["teacher"] == 2
    assert by_text["pace"] == 1
    assert "!" not in by_text
    assert words[0].text == "great"
    weights = [w.weight for w in words]
    assert weights == sorted(weights, reverse=True)


def test_word_cloud_is_capped():
    text = " ".join(f"tok{chr(97 + i // 26)}{chr(97 + i % 26)}" for i in range(120))
    words = generate_word_cloud([FakeAnswer(text), FakeAnswer("popular popular")], limit=50)
    assert len(words) == 50
    weights = [w.weight for w in words]
    assert weights == sorted(weights, reverse=True)


def test_word_cloud_handles_chinese_text():
    words = generate_word_cloud([FakeAnswer("老师讲得很好，课程内容很丰富"), FakeAnswer("   ")])
    assert words
    assert all(len(w.text) > 1 for w in words)


# ---------- despacho por tipo ----------

def test_question_insight_star():
    insight = generate_question_insight(7, {"type": "star", "maxRating": 5}, [FakeAnswer("5")])
    assert isinstance(insight, StarDistributionInsightOut)
    assert insight.question_id == 7
    assert insight.total_responses == 1
    assert insight.average == 5


def test_question_insight_input_counts_all_answers():
    answers = [FakeAnswer("good"), FakeAnswer(""), FakeAnswer("x")]
    insight = generate_question_insight(3, InputConfig(max_length=20), answers)
    assert isinstance(insight, WordCloudInsightOut)
    assert insight.total_responses == 3
    assert [w.text for w in insight.words] == ["good"]


def test_question_insight_default_max_rating():
    insight = generate_question_insight(1, {"type": "star"}, [])
    assert list(insight.distribution) == [0, 1, 2, 3, 4, 5]


def test_unsupported_question_type():
    with pytest.raises(UnsupportedQuestionType):
        generate_question_insight(1, {"type": "matrix"}, [])


def test_parse_question_config():
    assert parse_question_config({"type": "star", "maxRating": 3}) == StarConfig(max_rating=3)
    config = parse_question_config({"type": "input", "multiline": True})
    assert isinstance(config, InputConfig)
    assert config.multiline is True
    assert config.max_length is None


def test_star_average_rounds_half_up():
    # 33 / 8 = 4.125
    result = generate_star_distribution(["5", "5", "5", "4", "4", "4", "3", "3"], 5)
    assert result["average"] == 4.13


def test_invalid_config_for_known_type():
    with pytest.raises(InvalidQuestionConfig) as exc:
        generate_question_insight(1, {"type": "star", "maxRating": 50}, [])
    assert "star" in exc.value.detail
    assert "no soportado" not in exc.value.detail
    assert not isinstance(exc.value, UnsupportedQuestionType)
