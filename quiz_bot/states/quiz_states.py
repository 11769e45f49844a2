from aiogram.fsm.state import StatesGroup, State


class QuizFlow(StatesGroup):
    waiting_for_json = State()
    waiting_for_source_text = State()
    choosing_mode = State()
    choosing_question_count = State()
    entering_custom_count = State()
    answering_question = State()
    viewing_results = State()
