"""
Interactive shell over a set of in-process graph replicas.
"""

import json
import logging
import time
try:
    import readline
except ImportError:
    readline = None
from typing import Any, Dict, List, Optional

from .config import ReplicaConfig
from .errors import LWWGraphError
from .replica import Replica
from .sync import encode_state

logger = logging.getLogger(__name__)


class ReplicaCLI:
    """
    Interactive command-line interface for LWW graph replicas.

    Several replicas live side by side; commands apply to the current
    one, and MERGE/SYNC reconcile it with another.
    """

    COMMANDS = {
        # Replica management
        "REPLICA": "REPLICA <name> - Create or switch to a replica",
        "REPLICAS": "REPLICAS - List replicas",

        # Mutations
        "ADDV": "ADDV <vertex> - Add a vertex",
        "RMV": "RMV <vertex> - Remove a vertex",
        "ADDE": "ADDE <from> <to> - Add a directed edge",
        "RME": "RME <from> <to> - Remove a directed edge",

        # Queries
        "HASV": "HASV <vertex> - Check if a vertex exists",
        "HASE": "HASE <from> <to> - Check if an edge exists",
        "VERTICES": "VERTICES - List vertices",
        "EDGES": "EDGES - List edges",
        "NEIGHBORS": "NEIGHBORS <vertex> - Vertices connected in either direction",
        "PATH": "PATH <from> <to> - Shortest directed path",

        # Synchronization
        "MERGE": "MERGE <name> - Merge a replica into the current one",
        "SYNC": "SYNC <name> - Merge both ways with a replica",
        "DUMP": "DUMP - Show raw replica state",
        "DIGEST": "DIGEST - Show state digest",
        "STATS": "STATS - Show statistics",

        # Help
        "DEBUG": "DEBUG <on|off> - Toggle debug mode",
        "HELP": "HELP [command] - Show help",
        "QUIT": "QUIT - Exit the CLI",
        "EXIT": "EXIT - Exit the CLI",
    }

    def __init__(self, replica_ids: Optional[List[str]] = None, log_level: str = "WARNING"):
        self.log_level = log_level
        self.replicas: Dict[str, Replica] = {}
        self.current: Optional[Replica] = None
        self.debug_mode = False

        for replica_id in replica_ids or ["a"]:
            self._get_or_create(replica_id)
        self.current = self.replicas[(replica_ids or ["a"])[0]]

        self.history_file = ".lwwgraph_history"
        self._load_history()

    def _get_or_create(self, replica_id: str) -> Replica:
        replica = self.replicas.get(replica_id)
        if replica is None:
            config = ReplicaConfig(replica_id=replica_id, log_level=self.log_level)
            replica = self.replicas[replica_id] = Replica(replica_id, config)
        return replica

    def _load_history(self):
        """Load command history."""
        if readline:
            try:
                readline.read_history_file(self.history_file)
            except OSError:
                pass

    def _save_history(self):
        """Save command history."""
        if readline:
            try:
                readline.write_history_file(self.history_file)
            except OSError as e:
                logger.debug("Could not save history: %s", e)

    def run(self):
        """Run the interactive CLI."""
        print("LWW graph shell. Type 'HELP' for commands.")
        print()

        try:
            while True:
                try:
                    line = input(f"lwwgraph:{self.current.replica_id}> ").strip()
                    if not line:
                        continue

                    result = self.execute(line)
                    if result is None:  # Exit command
                        break

                    self._print_result(result)

                except KeyboardInterrupt:
                    print()
                    continue
                except EOFError:
                    break
        finally:
            self._save_history()
            print("Goodbye!")

    def execute(self, line: str) -> Optional[Dict[str, Any]]:
        """
        Execute a command line.

        Returns:
            Result dict, or None to exit
        """
        parts = line.split()
        if not parts:
            return {"error": "Empty command"}

        cmd = parts[0].upper()
        args = [self._parse_value(arg) for arg in parts[1:]]

        if cmd in ("QUIT", "EXIT"):
            return None

        handler = getattr(self, f"_cmd_{cmd.lower()}", None)
        if handler is None:
            return {"error": f"Unknown command: {cmd}"}

        start = time.time()
        try:
            result = handler(args)
        except LWWGraphError as e:
            result = {"error": str(e)}
        result["time_ms"] = (time.time() - start) * 1000
        return result

    @staticmethod
    def _parse_value(token: str) -> Any:
        """Integers stay integers, everything else is a string key."""
        try:
            return int(token)
        except ValueError:
            return token

    def _print_result(self, result: Dict[str, Any]):
        """Print command result."""
        if "error" in result:
            print(f"ERROR: {result['error']}")
        elif "data" in result:
            data = result["data"]
            if isinstance(data, (dict, list)):
                print(json.dumps(data, indent=2, default=str))
            else:
                print(data)
        elif "message" in result:
            print(result["message"])

        if self.debug_mode and "time_ms" in result:
            print(f"(took {result['time_ms']:.2f}ms)")

    @staticmethod
    def _require(args: List[Any], count: int, usage: str) -> Optional[Dict]:
        if len(args) != count:
            return {"error": f"Usage: {usage}"}
        return None

    # ============ Local Commands ============

    def _cmd_help(self, args: List[Any]) -> Dict:
        """Show help."""
        if args:
            cmd = str(args[0]).upper()
            if cmd in self.COMMANDS:
                return {"message": self.COMMANDS[cmd]}
            return {"error": f"Unknown command: {cmd}"}

        lines = ["Available commands:", ""]
        for cmd, desc in sorted(self.COMMANDS.items()):
            lines.append(f"  {desc}")

        return {"message": "\n".join(lines)}

    def _cmd_debug(self, args: List[Any]) -> Dict:
        """Toggle debug mode."""
        if args:
            self.debug_mode = str(args[0]).lower() in ("on", "true", "1")
        else:
            self.debug_mode = not self.debug_mode

        return {"message": f"Debug mode: {'ON' if self.debug_mode else 'OFF'}"}

    # ============ Replica Commands ============

    def _cmd_replica(self, args: List[Any]) -> Dict:
        error = self._require(args, 1, self.COMMANDS["REPLICA"])
        if error:
            return error
        self.current = self._get_or_create(str(args[0]))
        return {"message": f"Using replica {self.current.replica_id}"}

    def _cmd_replicas(self, args: List[Any]) -> Dict:
        lines = []
        for replica_id, replica in sorted(self.replicas.items()):
            marker = "*" if replica is self.current else " "
            lines.append(f"{marker} {replica_id:<12} {replica.digest()[:12]}")
        return {"message": "\n".join(lines)}

    def _cmd_addv(self, args: List[Any]) -> Dict:
        error = self._require(args, 1, self.COMMANDS["ADDV"])
        if error:
            return error
        return {"message": f"OK {self.current.add_vertex(args[0])}"}

    def _cmd_rmv(self, args: List[Any]) -> Dict:
        error = self._require(args, 1, self.COMMANDS["RMV"])
        if error:
            return error
        return {"message": f"OK {self.current.remove_vertex(args[0])}"}

    def _cmd_adde(self, args: List[Any]) -> Dict:
        error = self._require(args, 2, self.COMMANDS["ADDE"])
        if error:
            return error
        return {"message": f"OK {self.current.add_edge(args[0], args[1])}"}

    def _cmd_rme(self, args: List[Any]) -> Dict:
        error = self._require(args, 2, self.COMMANDS["RME"])
        if error:
            return error
        return {"message": f"OK {self.current.remove_edge(args[0], args[1])}"}

    def _cmd_hasv(self, args: List[Any]) -> Dict:
        error = self._require(args, 1, self.COMMANDS["HASV"])
        if error:
            return error
        return {"data": self.current.contains_vertex(args[0])}

    def _cmd_hase(self, args: List[Any]) -> Dict:
        error = self._require(args, 2, self.COMMANDS["HASE"])
        if error:
            return error
        return {"data": self.current.contains_edge(args[0], args[1])}

    def _cmd_vertices(self, args: List[Any]) -> Dict:
        return {"data": self.current.vertices()}

    def _cmd_edges(self, args: List[Any]) -> Dict:
        return {"data": [list(edge) for edge in self.current.edges()]}

    def _cmd_neighbors(self, args: List[Any]) -> Dict:
        error = self._require(args, 1, self.COMMANDS["NEIGHBORS"])
        if error:
            return error
        return {"data": sorted(self.current.all_connected_vertices(args[0]), key=str)}

    def _cmd_path(self, args: List[Any]) -> Dict:
        error = self._require(args, 2, self.COMMANDS["PATH"])
        if error:
            return error
        path = self.current.any_path(args[0], args[1])
        if not path:
            return {"message": "(no path)", "path": []}
        return {"message": " -> ".join(str(v) for v in path), "path": path}

    # ============ Synchronization Commands ============

    def _other(self, args: List[Any], usage: str):
        if len(args) != 1:
            return None, {"error": f"Usage: {usage}"}
        other = self.replicas.get(str(args[0]))
        if other is None:
            return None, {"error": f"Unknown replica: {args[0]}"}
        return other, None

    def _cmd_merge(self, args: List[Any]) -> Dict:
        other, error = self._other(args, self.COMMANDS["MERGE"])
        if error:
            return error
        self.current.merge(other)
        return {"message": f"Merged {other.replica_id} into {self.current.replica_id}"}

    def _cmd_sync(self, args: List[Any]) -> Dict:
        other, error = self._other(args, self.COMMANDS["SYNC"])
        if error:
            return error
        self.current.merge(other)
        other.merge(self.current)
        converged = self.current.digest() == other.digest()
        return {"message": f"Synced {self.current.replica_id} <-> {other.replica_id} "
                           f"(converged: {converged})"}

    def _cmd_dump(self, args: List[Any]) -> Dict:
        return {"data": encode_state(self.current.snapshot())}

    def _cmd_digest(self, args: List[Any]) -> Dict:
        return {"data": self.current.digest()}

    def _cmd_stats(self, args: List[Any]) -> Dict:
        return {"data": self.current.get_stats()}


def run_cli(replica_ids: Optional[List[str]] = None, log_level: str = "WARNING"):
    """Run the CLI."""
    cli = ReplicaCLI(replica_ids, log_level)
    cli.run()
