"""
The merge recipe is a fixed contract with the engine: gains, duration policy,
codec and bitrate must not drift.
"""
import pytest
from pydantic import ValidationError

from models.mix_recipe import MERGE_RECIPE, MixRecipe


def test_filter_graph_is_exact():
    assert MERGE_RECIPE.filter_complex == (
        "[0:a]volume=1.0[a1];[1:a]volume=0.4[a2];[a1][a2]amix=inputs=2:duration=longest"
    )


def test_argument_list_orders_speech_before_music():
    args = MERGE_RECIPE.build_args("speech.mp3", "music.mp3", "output.mp3")

    assert args == [
        "-i", "speech.mp3",
        "-i", "music.mp3",
        "-filter_complex",
        "[0:a]volume=1.0[a1];[1:a]volume=0.4[a2];[a1][a2]amix=inputs=2:duration=longest",
        "-c:a", "libmp3lame",
        "-b:a", "192k",
        "output.mp3",
    ]


def test_recipe_defaults():
    recipe = MixRecipe()
    assert recipe.speech_gain == 1.0
    assert recipe.music_gain == 0.4
    assert recipe.duration == "longest"
    assert recipe.codec == "libmp3lame"
    assert recipe.bitrate == "192k"


def test_shared_recipe_is_immutable():
    with pytest.raises(ValidationError):
        MERGE_RECIPE.music_gain = 1.0
