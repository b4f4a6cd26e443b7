"""Handles interactive/command-line mode for lci interpreter. Uses cmd as backend."""

import cmd

from termcolor import colored


class Shell(cmd.Cmd):
    """Lambda calculus interpreter shell."""
    intro = "Lambda calculus interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = ">>> "
    secondary_prompt = "... "  # used for line continuations
    _tmp_prompt = ">>> "        # also used for prompt swapping in line continuations
    COMMANDS = ("help", "?", "exit", "EOF")  # only recognized as a whole line

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""

    def onecmd(self, line):
        """Shell commands only run when typed alone, so `exit = λx x` is still an assignment. EOF always exits, since
        cmd.Cmd sends it when input runs out.
        """
        command = line.strip()
        if command == "EOF" or (not self._tmp_line and command in Shell.COMMANDS):
            return super().onecmd(command)
        if not command:
            return self.emptyline()
        return self.default(line)

    def default(self, line):
        """Executes arbitrary lci command."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line = self._tmp_line + line

            code = "\n".join(part.split("#")[0] for part in line.split("\n"))
            if code.count("(") > code.count(")"):
                self._tmp_line = line + "\n"
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if not code.strip():
                return  # only a comment

            result = self.sess.run_source(line)
            print(colored(result.render(), "green"))

    def completedefault(self, text, *ignored):
        """Completes global names, including the ones defined during this session."""
        return sorted(name for name in self.sess.names() if name.startswith(text))

    def completenames(self, text, *ignored):
        return super().completenames(text, *ignored) + self.completedefault(text, *ignored)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the lci interpreter!\n\n"
              "Lambda calculus is a Turing-complete language created by Alonzo Church. This \n"
              "interpreter supports pure lambda calculus, written with either 'λ' or '\\', and \n"
              "named functions.\n\n"
              "Try it out by typing 'I = λx x'. This will bind the lambda term 'λx x' to a \n"
              "name 'I'. Next, try typing 'I true'. This will apply 'I' to 'true', giving \n"
              "'λa λb a' as the result. The result of the last expression is kept in '_'.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
