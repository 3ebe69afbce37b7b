from streamlit.testing.v1 import AppTest


def save_budget(at, amount):
    at.text_input[0].set_value(amount)
    next(b for b in at.button if b.label == "Save").click()
    return at.run()


def test_budget_form_messages_survive_rerun(tmp_path, monkeypatch):
    monkeypatch.setenv("BUDGETTRACKER_DATA_DIR", str(tmp_path))
    at = AppTest.from_file("../app/main.py", default_timeout=30).run()
    at.sidebar.radio[0].set_value("💰 Budgets").run()

    save_budget(at, "50")
    assert [s.value for s in at.success] == ["Budget saved"]

    # same category and month as the first one
    save_budget(at, "60")
    assert [e.value for e in at.error] == ["A budget for this category and period already exists."]
    assert len(at.success) == 0
