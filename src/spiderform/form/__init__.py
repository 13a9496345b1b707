# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Form runtime binding data, validation state, lifecycle events and rendering."""

from spiderform.form.events import EventDispatcher, EventSubscriber, FormEvent, FormEvents
from spiderform.form.runtime import Form, FormState

__all__ = ["EventDispatcher", "EventSubscriber", "Form", "FormEvent", "FormEvents", "FormState"]
