"""Low-level terminal control: key codes, ANSI cursor movement and raw key input."""