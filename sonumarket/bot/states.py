from aiogram.fsm.state import State, StatesGroup


class Flow(StatesGroup):
    # a guided flow (configurator, CV, redaction, booking) owns the chat
    active = State()
