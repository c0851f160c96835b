"""
================================================================================
Agent UI Tests
================================================================================

Taking a build agent offline and back online through the UI, verified via
the JSON API. Needs an agent that is connected before the test starts
(JENKINS_AGENT); skipped otherwise.

================================================================================
"""

import allure
import pytest

from jenkins_acceptance.pages.agent import DEFAULT_OFFLINE_MESSAGE, Agent


@allure.epic("Acceptance Testing")
@allure.feature("Agents")
@pytest.mark.agent
class TestAgent:

    @allure.story("Executors")
    @allure.title("Connected agent reports its executors")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.smoke
    @pytest.mark.P2
    def test_agent_has_executors(self, agent: Agent):
        agent.wait_until_online()
        assert agent.get_executor_count() > 0

    @allure.story("Offline / Online")
    @allure.title("Agent can be marked offline and brought back online")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P0
    def test_mark_offline_and_online(self, agent: Agent):
        agent.wait_until_online()

        with allure.step("Mark offline"):
            agent.mark_offline()
            agent.wait_for(agent).with_timeout(30).until_matches(
                Agent.is_offline, "Agent is offline"
            )
            assert DEFAULT_OFFLINE_MESSAGE in agent.get_json()["offlineCauseReason"]

        with allure.step("Bring back online"):
            agent.mark_online()
            agent.wait_until_online()
            assert agent.is_online()
