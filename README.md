# bubbleapp

A small framework for terminal user interfaces built from functional
components. A component is a plain function `fn(ctx, props) -> str`. Hooks
give components state, effects, focus, key and mouse handling and periodic
ticks; a three-phase layout pass (intrinsic width, intrinsic height, final
render) works out the sizes of components that grow to fill their parent.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Concepts

- `bubbleapp.context.Ctx` is the render context. `Ctx.render(fn, props)`
  renders a component and returns its `bubbleapp.component.Component`
  record; `str()` of the record is the rendered text. Component ids are
  paths such as `Root[0]_stack[0]_counter[0]`; a `key` attribute on the
  props is added to the name. `Ctx.mouse_zone` and `Ctx.mouse_zone_child`
  mark text so mouse events can be routed back to the component.
  `Ctx.focus_next`, `Ctx.focus_prev` and `Ctx.focus_this` move focus.
- `bubbleapp.hooks` provides `use_id`, `use_state`, `use_effect`,
  `use_effect_with_cleanup`, `use_size`, `use_is_focused`, `use_on_focused`,
  `use_is_hovered`, `use_key_handler`, `use_global_key_handler`,
  `use_mouse_handler`, `use_action`, `use_msg_handler`, `use_tick` and
  `use_fcs`. Call them in the same order on every render. Effects and
  handlers are registered only in the final render phase. Passing
  `RUN_ONCE_DEPS` runs an effect once; passing `None` runs it on every
  render.
- `bubbleapp.layout` holds `Layout`, `LayoutDirection`, `Margin` and
  `Padding`. Components whose props carry a `Layout` field with `grow_x` or
  `grow_y` share the space left by their siblings, minus gaps.
- `bubbleapp.app.App` drives everything: pass messages from
  `bubbleapp.messages` (`KeyMsg`, `MouseMsg`, `WindowSizeMsg`,
  `InvalidateMsg`, ...) to `App.update` and draw with `App.view`. Keys go to
  the focused component first, then to global key handlers; otherwise tab
  and shift+tab move focus and ctrl+c quits. Any other message goes to the
  focused component's message handlers, and the first command one returns
  is handed back from `App.update`.
- `bubbleapp.tick.TickScheduler` runs one background timer at the greatest
  common divisor of all tick intervals (in seconds, at least 12 ms).
- `bubbleapp.provider` offers a context API (`Context`, `new_provider`,
  `use_context`) for passing values down the tree.
- `bubbleapp.router` provides nested routes with `:param` segments,
  `new_router`, `new_outlet`, `navigate`, `RouterController` history and
  `match_route`.
- `bubbleapp.stack` (`new_stack`), `bubbleapp.table` (`new_table`, with
  sized columns and a keyboard/mouse cursor) and `bubbleapp.viewport`
  (`Viewport`, a scrollable window with highlights and a left gutter) are
  ready-made building blocks. `bubbleapp.spinner.Spinner` holds animation
  frames with `reverse` and `boomerang`.
- `bubbleapp.ansi` measures, cuts and joins text that may hold ANSI escape
  sequences.

## The program object

`App.set_program(program)` attaches any object with `send(msg)` and
`quit()`. State setters, effects, `Ctx.update`, `Ctx.execute_cmd` and
`Ctx.quit` send to it, and raise `RuntimeError` when none is set.
`App.init` also requires it.

## Example

```python
from bubbleapp.app import App
from bubbleapp.context import Ctx
from bubbleapp.hooks import use_action, use_state
from bubbleapp.messages import KeyMsg, WindowSizeMsg
from bubbleapp.stack import new_stack


class Program:
    def __init__(self):
        self.inbox = []

    def send(self, msg):
        self.inbox.append(msg)

    def quit(self):
        print("quit")


def counter(c, props):
    count, set_count = use_state(c, 0)
    use_action(c, lambda _child: set_count(lambda n: n + 1))
    return c.mouse_zone(f"[ pressed {count} times ]")


def root(c):
    return new_stack(c, lambda c: [c.render(counter, None)])


app = App(Ctx(), root)
app.set_program(Program())
app.update(WindowSizeMsg(width=80, height=24))
app.view()
app.update(KeyMsg("tab"))    # focus the counter
app.update(KeyMsg("enter"))  # trigger its action
print(app.view())
```

## What this package does not do

It does not read the terminal or draw to it, and it has no command to run.
You supply the event loop: turn terminal input into `bubbleapp.messages`
objects, pass them to `App.update`, and write the string from `App.view` to
the screen. Styling is limited to the plain ANSI attributes the table uses;
there are no themes, colours, borders beyond the table's box, or ready-made
text, button, tab, form or markdown components.