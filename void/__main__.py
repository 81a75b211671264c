from void.VoidAppBackEnd import main

main()
